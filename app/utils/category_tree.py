"""
Agregación de productos sobre el árbol de categorías

Funciones puras sobre una foto en memoria de todas las categorías: se
construye un índice padre -> hijos una sola vez y los totales se
memorizan, de modo que el cálculo es lineal en el número de categorías.
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, List, Optional


class CategoryTreeError(ValueError):
    """El árbol supera la profundidad máxima (o contiene un ciclo)"""


@dataclass(frozen=True)
class CategoryCount:
    id: Hashable
    parent_id: Optional[Hashable]
    direct_count: int


def build_children_index(nodes: Iterable[CategoryCount]) -> Dict[Hashable, List[Hashable]]:
    """Índice padre -> hijos; los padres desconocidos se ignoran"""
    nodes = list(nodes)
    known = {n.id for n in nodes}
    children: Dict[Hashable, List[Hashable]] = defaultdict(list)
    for node in nodes:
        if node.parent_id is not None and node.parent_id in known:
            children[node.parent_id].append(node.id)
    return children


def aggregate_product_counts(
    nodes: Iterable[CategoryCount],
    max_depth: int = 32,
) -> Dict[Hashable, int]:
    """
    Total de productos por categoría: directos + los de todos sus descendientes.

    Args:
        nodes: foto de todas las categorías con su conteo directo
        max_depth: corte de profundidad; superarlo lanza CategoryTreeError

    Returns:
        dict: id de categoría -> total agregado
    """
    nodes = list(nodes)
    direct = {n.id: n.direct_count for n in nodes}
    children = build_children_index(nodes)
    totals: Dict[Hashable, int] = {}

    def total(node_id: Hashable, depth: int) -> int:
        if node_id in totals:
            return totals[node_id]
        if depth > max_depth:
            raise CategoryTreeError(
                f"Category tree deeper than {max_depth} levels at {node_id}"
            )
        value = direct[node_id] + sum(total(c, depth + 1) for c in children.get(node_id, []))
        totals[node_id] = value
        return value

    for node in nodes:
        total(node.id, 0)
    return totals


def aggregate_product_count(
    nodes: Iterable[CategoryCount],
    category_id: Hashable,
    max_depth: int = 32,
) -> int:
    """Total agregado de una categoría concreta (0 si no existe)"""
    return aggregate_product_counts(nodes, max_depth).get(category_id, 0)


def build_tree(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Anidar una lista plana de categorías (dicts con ``id`` y ``parent_id``).

    Se conserva el orden de entrada entre hermanos. Las categorías cuyo
    padre no está en la lista se tratan como raíces.
    """
    by_id = {item["id"]: {**item, "children": []} for item in items}
    roots: List[Dict[str, Any]] = []
    for item in items:
        node = by_id[item["id"]]
        parent = by_id.get(item.get("parent_id"))
        if parent is not None and parent is not node:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots
