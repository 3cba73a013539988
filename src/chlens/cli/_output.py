"""Shared output formatting for CLI commands."""

from __future__ import annotations

import json

from chlens.adapters._base import ResultEnvelope, SearchItem, TreeNode


def format_envelope(result: ResultEnvelope, *, output_format: str = "text") -> str:
    if output_format == "json":
        data: dict[str, object] = {
            "conn_id": result.conn_id,
            "query": result.query,
            "columns": result.cols,
            "rows": result.rows,
            "row_count": result.row_count,
            "messages": result.messages,
            "duration_ms": result.duration_ms,
        }
        if result.error is not None:
            data["error"] = str(result.error)
            code = getattr(result.error, "code", None)
            if code is not None:
                data["error_code"] = code
        return json.dumps(data, indent=2, default=str)

    if result.error is not None:
        if not result.messages:
            return "error: query failed"
        return "\n".join(f"error: {m}" for m in result.messages)

    # Text format: simple tabular output.
    lines: list[str] = []
    if result.cols:
        lines.append(" | ".join(result.cols))
        lines.append("-+-".join("-" * max(len(c), 5) for c in result.cols))
        for row in result.rows:
            lines.append(" | ".join(str(row.get(c, "")) for c in result.cols))

    duration = f", {result.duration_ms:.0f}ms" if result.duration_ms is not None else ""
    lines.append(f"\n({result.row_count} rows{duration})")
    return "\n".join(lines)


def node_to_dict(node: TreeNode) -> dict[str, object]:
    doc: dict[str, object] = {
        "label": node.label,
        "type": node.type.value,
    }
    if node.child_type is not None:
        doc["child_type"] = node.child_type.value
    if node.schema is not None:
        doc["schema"] = node.schema
    if node.detail is not None:
        doc["detail"] = node.detail
    return doc


def format_nodes(nodes: list[TreeNode], *, output_format: str = "text") -> str:
    if output_format == "json":
        return json.dumps({"items": [node_to_dict(n) for n in nodes]}, indent=2, default=str)
    lines = []
    for n in nodes:
        line = n.label
        if n.detail:
            line += f"  {n.detail}"
        lines.append(line)
    return "\n".join(lines)


def format_search(items: list[SearchItem], *, output_format: str = "text") -> str:
    if output_format == "json":
        return json.dumps(
            {"items": [{"type": i.type.value, **i.fields} for i in items]},
            indent=2,
            default=str,
        )
    lines = []
    for i in items:
        schema = i.fields.get("schema")
        table = i.fields.get("table")
        prefix = ".".join(str(p) for p in (schema, table) if p)
        lines.append(f"{prefix}.{i.label}" if prefix else i.label)
    return "\n".join(lines)
