"""Setting the width and height of an SVG document."""

from __future__ import annotations

from xml.parsers import expat

XMLTAG = '<?xml version="1.0" encoding="UTF-8"?><!DOCTYPE svg>'

_TEXT_ESCAPES = {
    '"': "&#34;",
    "'": "&#39;",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\t": "&#x9;",
    "\r": "&#xD;",
}
_TEXT_TABLE = str.maketrans(_TEXT_ESCAPES)
_ATTR_TABLE = str.maketrans({**_TEXT_ESCAPES, "\n": "&#xA;"})


def _local(name: str) -> str:
    return name.rpartition(":")[2]


class _Rewriter:
    def __init__(self, width: int, height: int) -> None:
        self.width = str(width)
        self.height = str(height)
        self.parts: list[str] = []
        self._namespaces: list[str | None] = [None]

    def _sized(self, attrs: list[tuple[str, str]]) -> list[tuple[str, str]]:
        out = []
        has_width = has_height = False
        for name, value in attrs:
            local = _local(name)
            if local == "width":
                value, has_width = self.width, True
            elif local == "height":
                value, has_height = self.height, True
            out.append((name, value))
        if not has_height:
            out.append(("height", self.height))
        if not has_width:
            out.append(("width", self.width))
        return out

    def start(self, name: str, flat_attrs: list[str]) -> None:
        attrs = list(zip(flat_attrs[::2], flat_attrs[1::2]))
        parent_ns = self._namespaces[-1]
        own_ns = next((value for key, value in attrs if key == "xmlns"), None)
        self._namespaces.append(own_ns if own_ns is not None else parent_ns)
        rest = [(key, value) for key, value in attrs if key != "xmlns"]
        if _local(name) == "svg":
            rest = self._sized(rest)
        if own_ns is not None and own_ns != parent_ns:
            rest.insert(0, ("xmlns", own_ns))
        rendered = "".join(f' {key}="{value.translate(_ATTR_TABLE)}"' for key, value in rest)
        self.parts.append(f"<{name}{rendered}>")

    def end(self, name: str) -> None:
        self._namespaces.pop()
        self.parts.append(f"</{name}>")

    def text(self, data: str) -> None:
        self.parts.append(data.translate(_TEXT_TABLE))

    def comment(self, data: str) -> None:
        self.parts.append(f"<!--{data}-->")

    def instruction(self, target: str, data: str) -> None:
        self.parts.append(f"<?{target} {data}?>" if data else f"<?{target}?>")

    def doctype(self, name, system_id, public_id, _has_internal_subset) -> None:
        if public_id:
            self.parts.append(f'<!DOCTYPE {name} PUBLIC "{public_id}" "{system_id or ""}">')
        elif system_id:
            self.parts.append(f'<!DOCTYPE {name} SYSTEM "{system_id}">')
        else:
            self.parts.append(f"<!DOCTYPE {name}>")


def update_svg_string(svg: str, width: int, height: int) -> str:
    """Return svg with the width and height of its svg elements set.

    Missing width or height attributes are added. The result starts with an
    XML declaration and doctype; an empty input gives an empty string.
    Raises ValueError on malformed XML.
    """
    if not svg:
        return ""
    if not svg.strip():
        return XMLTAG + svg.translate(_TEXT_TABLE)
    rewriter = _Rewriter(width, height)
    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    parser.buffer_text = True
    parser.StartElementHandler = rewriter.start
    parser.EndElementHandler = rewriter.end
    parser.CharacterDataHandler = rewriter.text
    parser.CommentHandler = rewriter.comment
    parser.ProcessingInstructionHandler = rewriter.instruction
    parser.StartDoctypeDeclHandler = rewriter.doctype
    try:
        parser.Parse(svg, True)
    except expat.ExpatError as exc:
        raise ValueError(f"invalid SVG: {exc}") from exc
    body = "".join(rewriter.parts)
    return XMLTAG + body if body else ""