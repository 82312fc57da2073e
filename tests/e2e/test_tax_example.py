"""End-to-end: a personal-finance diagram built with the remaining/required helpers.

Salary and bonus flow into income, income splits into pension and taxable
pay, taxable pay into tax, national insurance, student loan, bills, spending
and savings. The graph is laid out and rendered at 512 x 512.
"""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass

import pytest

from sankey_diagram import SankeyGraph, SankeyStyle, compute_layout, render_svg
from sankey_diagram.renderers.svg import SVG_NS

INCOME_NODE_COLOR, INCOME_EDGE_COLOR = "#F66F", "#F665"
TAX_NODE_COLOR, TAX_EDGE_COLOR = "#777F", "#7775"
BILLS_NODE_COLOR, BILLS_EDGE_COLOR = "#974F", "#9845"
SPENDING_NODE_COLOR, SPENDING_EDGE_COLOR = "#EC5F", "#EC55"
SAVING_NODE_COLOR, SAVING_EDGE_COLOR = "#C5EF", "#C5E5"
EMPLOYER_NODE_COLOR, EMPLOYER_EDGE_COLOR = "#6B7F", "#6B75"
GOVERNMENT_NODE_COLOR, GOVERNMENT_EDGE_COLOR = "#27BF", "#27B5"


@dataclass
class Band:
    max: float
    rate: float


TAX_BANDS = [
    Band(12570.0, 0.0),
    Band(50270.0, 0.2),
    Band(100000.0, 0.4),
    Band(125140.0, 0.6),
    Band(150000.0, 0.4),
    Band(math.inf, 0.45),
]
NATIONAL_INSURANCE_CONTRIBUTION_BANDS = [
    Band(12570.0, 0.0),
    Band(50270.0, 0.1325),
    Band(math.inf, 0.0325),
]
NATIONAL_INSURANCE_BANDS = [Band(9100.0, 0.0), Band(math.inf, 0.1505)]
STUDENT_LOAN_BANDS = [Band(27295.0, 0.0), Band(math.inf, 0.09)]


def apply_tax(income: float, bands: list[Band]) -> float:
    tax = 0.0
    for band in bands:
        tax += band.rate * min(income, band.max)
        income -= band.max
        if income <= 0:
            break
    return tax


def build_tax_graph() -> tuple[SankeyGraph, dict]:
    g = SankeyGraph()
    n = {}

    n["salary"] = salary = g.add_node(50000.0, "Salary", INCOME_NODE_COLOR)
    n["bonus"] = bonus = g.add_node(5000.0, "Bonus", INCOME_NODE_COLOR)
    n["employer"] = employer = g.add_node(None, "Employer", EMPLOYER_NODE_COLOR)
    n["government"] = government = g.add_node(None, "Government", GOVERNMENT_NODE_COLOR)

    n["income"] = income = g.add_node(None, "Income", INCOME_NODE_COLOR)
    g.add_edge(salary, income, g.remaining_output(salary), color=INCOME_EDGE_COLOR)
    g.add_edge(bonus, income, g.remaining_output(bonus), color=INCOME_EDGE_COLOR)

    n["pension"] = pension = g.add_node(None, "Pension", SAVING_NODE_COLOR)
    g.add_edge(income, pension, g.required_output(income) * 0.1, color=SAVING_EDGE_COLOR)
    g.add_edge(employer, pension, g.current_input(pension), color=EMPLOYER_EDGE_COLOR)

    n["taxable"] = taxable = g.add_node(None, "Taxable", INCOME_NODE_COLOR)
    g.add_edge(income, taxable, g.remaining_output(income), color=INCOME_EDGE_COLOR)

    n["tax"] = tax = g.add_node(None, "Tax", TAX_NODE_COLOR)
    g.add_edge(taxable, tax, apply_tax(g.required_output(taxable), TAX_BANDS), color=TAX_EDGE_COLOR)

    ni_value = apply_tax(g.required_output(taxable), NATIONAL_INSURANCE_BANDS)
    n["ni"] = ni = g.add_node(ni_value, "National Insurance", TAX_NODE_COLOR)
    g.add_edge(
        taxable,
        ni,
        apply_tax(g.required_output(taxable), NATIONAL_INSURANCE_CONTRIBUTION_BANDS),
        color=TAX_EDGE_COLOR,
    )
    g.add_edge(employer, ni, g.remaining_input(ni), color=EMPLOYER_EDGE_COLOR)

    n["student_loan"] = student_loan = g.add_node(None, "Student Loan", TAX_NODE_COLOR)
    g.add_edge(
        taxable, student_loan, apply_tax(g.required_output(taxable), STUDENT_LOAN_BANDS), color=TAX_EDGE_COLOR
    )

    for key, value, label, node_color, edge_color in [
        ("rent", 8400.0, "Rent", BILLS_NODE_COLOR, BILLS_EDGE_COLOR),
        ("bills", 1000.0, "Bills", BILLS_NODE_COLOR, BILLS_EDGE_COLOR),
        ("food", 2500.0, "Food", SPENDING_NODE_COLOR, SPENDING_EDGE_COLOR),
        ("travel", 5000.0, "Travel", SPENDING_NODE_COLOR, SPENDING_EDGE_COLOR),
        ("other", 2000.0, "Other", SPENDING_NODE_COLOR, SPENDING_EDGE_COLOR),
    ]:
        n[key] = node = g.add_node(value, label, node_color)
        g.add_edge(taxable, node, g.required_input(node), color=edge_color)

    if g.remaining_output(taxable) > 0:
        n["lisa"] = lisa = g.add_node(None, "LISA", SAVING_NODE_COLOR)
        g.add_edge(taxable, lisa, min(g.remaining_output(taxable), 4000.0), color=SAVING_EDGE_COLOR)
        g.add_edge(government, lisa, g.current_input(lisa) * 0.25, color=GOVERNMENT_EDGE_COLOR)

    if g.remaining_output(taxable) > 0:
        n["isa"] = isa = g.add_node(None, "ISA", SAVING_NODE_COLOR)
        g.add_edge(taxable, isa, min(g.remaining_output(taxable), 16000.0), color=SAVING_EDGE_COLOR)

    if g.remaining_output(taxable) > 0:
        n["savings"] = savings = g.add_node(None, "Savings", SAVING_NODE_COLOR)
        g.add_edge(taxable, savings, g.remaining_output(taxable), color=SAVING_EDGE_COLOR)

    return g, n


STYLE = SankeyStyle(number_format=lambda x: f"£{x:.2f}")


@pytest.fixture()
def tax_graph():
    return build_tax_graph()


class TestTaxExample:
    def test_graph_is_balanced(self, tax_graph):
        g, n = tax_graph
        assert g.unbalanced_nodes() == []
        assert g.flow(n["income"]) == pytest.approx(55000.0)
        assert g.remaining_output(n["taxable"]) == pytest.approx(0.0, abs=1e-6)

    def test_layers(self, tax_graph):
        g, n = tax_graph
        result = compute_layout(g, 512.0, 512.0, STYLE, strict=True)
        assert result.layers[0] == [n["salary"], n["bonus"], n["employer"], n["government"]]
        assert result.layer_of(n["income"]) == 1
        assert result.layer_of(n["taxable"]) == 2
        assert result.layer_of(n["pension"]) == 2
        assert result.layer_of(n["tax"]) == 3
        assert result.layer_of(n["ni"]) == 3
        for edge in g.edges:
            assert result.layer_of(edge.source) < result.layer_of(edge.target)

    def test_every_layer_fits(self, tax_graph):
        g, _ = tax_graph
        result = compute_layout(g, 512.0, 512.0, STYLE)
        style = result.style
        for layer in result.layers:
            boxes = [result.node(nid) for nid in layer]
            top = boxes[0].y
            bottom = boxes[-1].y + boxes[-1].height
            assert top >= style.border - 1e-6
            assert bottom <= 512.0 - style.border + 1e-6

    def test_ribbons_stay_inside_boxes(self, tax_graph):
        g, _ = tax_graph
        result = compute_layout(g, 512.0, 512.0, STYLE)
        for le in result.edges:
            src, tgt = result.node(le.source), result.node(le.target)
            assert le.source_anchor.y_bottom <= src.y + src.height + 1e-6
            assert le.target_anchor.y_bottom <= tgt.y + tgt.height + 1e-6

    def test_rendered_document(self, tax_graph):
        g, n = tax_graph
        root = ET.fromstring(render_svg(g, 512.0, 512.0, STYLE))
        ns = {"svg": SVG_NS}
        assert len(root.findall("svg:rect", ns)) == len(g)
        assert len(root.findall("svg:g", ns)) == g.edge_count
        labels = {
            t.findall("svg:tspan", ns)[0].text: t.findall("svg:tspan", ns)[1].text
            for t in root.findall("svg:text", ns)
        }
        assert labels["Income"] == "£55000.00"
        assert labels["Salary"] == "£50000.00"
        assert labels["Rent"] == "£8400.00"
