"""
ER Diagram Visualization Module - lays out the schema graph and renders it
with matplotlib, or exports it as Graphviz DOT source
"""
import logging
import os
import re
from typing import Dict, Optional, Tuple

import graphviz
import matplotlib.pyplot as plt
import networkx as nx

from .config import DEFAULT_TITLE
from .er_model import TablesInput, RelationshipsInput, build_graph

logger = logging.getLogger(__name__)

Positions = Dict[str, Tuple[float, float]]

# Characters with a meaning inside Graphviz record labels
_RECORD_SPECIAL = re.compile(r'([{}|<>"\\])')


def layout(graph: nx.DiGraph, seed: int = 42, iterations: int = 50) -> Positions:
    """
    Force-directed (Fruchterman-Reingold) node placement

    The same graph and seed give the same coordinates for a given
    networkx/numpy version.
    """
    if graph.number_of_nodes() == 0:
        return {}
    raw = nx.spring_layout(graph, seed=seed, iterations=iterations)
    return {node: (float(xy[0]), float(xy[1])) for node, xy in raw.items()}


class ERDiagramRenderer:
    """Renders a schema graph as circles joined by arrows"""

    def __init__(self, title: str = DEFAULT_TITLE, node_color: str = "lightblue",
                 node_size: int = 6000, figsize: Tuple[float, float] = (10.0, 8.0),
                 dpi: int = 150, font_size: int = 8):
        self.title = title
        self.node_color = node_color
        self.node_size = node_size
        self.figsize = figsize
        self.dpi = dpi
        self.font_size = font_size

    def draw(self, graph: nx.DiGraph, positions: Positions):
        """Draw onto a new figure and return it; the caller closes it"""
        missing = [node for node in graph.nodes if node not in positions]
        if missing:
            raise ValueError(f"No position for node(s): {', '.join(map(str, missing))}")

        fig, ax = plt.subplots(figsize=self.figsize)
        try:
            if graph.number_of_nodes():
                nx.draw_networkx_nodes(
                    graph, positions, ax=ax,
                    node_size=self.node_size,
                    node_color=self.node_color,
                    edgecolors="black",
                )
                if graph.number_of_edges():
                    nx.draw_networkx_edges(
                        graph, positions, ax=ax,
                        arrows=True,
                        arrowstyle="-|>",
                        arrowsize=20,
                        node_size=self.node_size,
                    )
                labels = {node: data.get("label", node) for node, data in graph.nodes(data=True)}
                nx.draw_networkx_labels(graph, positions, labels=labels, ax=ax,
                                        font_size=self.font_size)
                # Keep the large circles inside the canvas
                ax.margins(0.2)

            ax.set_title(self.title)
            ax.set_axis_off()
        except Exception:
            plt.close(fig)
            raise
        return fig

    def save(self, graph: nx.DiGraph, positions: Positions,
             output: Optional[str] = None, show: bool = False) -> Optional[str]:
        """Render, write to ``output`` if given, optionally display"""
        fig = self.draw(graph, positions)
        try:
            if output:
                directory = os.path.dirname(output)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                fig.savefig(output, dpi=self.dpi, bbox_inches="tight")
                logger.info(f"ER diagram saved to {output}")
            if show:
                plt.show()
        finally:
            plt.close(fig)
        return output

    def to_dot(self, graph: nx.DiGraph, name: str = "ER_Diagram") -> graphviz.Digraph:
        """Record-shaped Graphviz view of the same graph"""
        dot = graphviz.Digraph(name, format="png")
        dot.attr(rankdir="LR", label=self.title, labelloc="t")
        dot.attr("node", shape="record", fontname="Arial", fontsize="10",
                 style="filled", fillcolor=self.node_color)
        dot.attr("edge", arrowsize="0.7", penwidth="1.2")

        for node, data in graph.nodes(data=True):
            fields = [_escape_record(str(node))]
            columns = data.get("columns") or []
            if columns:
                fields.append("".join(f"{_escape_record(c)}\\l" for c in columns))
            dot.node(str(node), label="{" + "|".join(fields) + "}")

        for source, target in graph.edges:
            dot.edge(str(source), str(target))
        return dot

    def save_dot(self, graph: nx.DiGraph, path: str) -> str:
        """Write DOT source; needs no Graphviz installation"""
        dot = self.to_dot(graph)
        written = dot.save(filename=path)
        logger.info(f"DOT source saved to {written}")
        return written


def _escape_record(text: str) -> str:
    return _RECORD_SPECIAL.sub(r"\\\1", text)


def render(graph: nx.DiGraph, positions: Positions, output: Optional[str] = None,
           show: bool = False, title: str = DEFAULT_TITLE, **settings) -> Optional[str]:
    """
    Render a laid-out graph

    Args:
        graph: graph from build_graph
        positions: coordinates from layout
        output: image path; the format follows the file suffix
        show: display the figure interactively
        title: figure title
        settings: extra ERDiagramRenderer options (node_color, dpi, ...)

    Returns:
        The output path, or None when nothing was written
    """
    renderer = ERDiagramRenderer(title=title, **settings)
    return renderer.save(graph, positions, output=output, show=show)


def render_er_diagram(tables: TablesInput,
                      relationships: RelationshipsInput,
                      output: Optional[str] = "output/er_diagram.png",
                      seed: int = 42,
                      show: bool = False,
                      strict: bool = True,
                      **settings) -> Optional[str]:
    """
    Convenience function running build -> layout -> render

    Returns:
        Path to the generated image file, or None if only shown
    """
    graph = build_graph(tables, relationships, strict=strict)
    positions = layout(graph, seed=seed)
    return render(graph, positions, output=output, show=show, **settings)
