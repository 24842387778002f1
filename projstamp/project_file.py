"""
Load, walk, patch and save project description documents.

Project files are MSBuild-style XML.  ElementTree keeps no parent links, so
ancestor queries go through an explicit child -> parent map built from the
tree.  Everything the parser does not model (the XML declaration and any
comments before and after the root element, a UTF-8 or UTF-16 byte order
mark, CRLF line endings, trailing whitespace) is captured on load and
written back verbatim on save.
"""
import codecs
import io
import logging
import os
import re
import shutil
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from projstamp.errors import ParseError, StructuralError

logger = logging.getLogger(__name__)

PROPERTY_GROUP = "PropertyGroup"
TARGET_FRAMEWORK = "TargetFramework"

# Declaration, comments, processing instructions and a simple DOCTYPE
# preceding the root element.
_PROLOG = re.compile(
    r"(?:\s+|<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^>\[]*>)*",
    re.DOTALL,
)
_DECLARED_ENCODING = re.compile(rb"""^<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")

# Byte order marks and the codec that reads what follows them.
_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def local_name(tag) -> str:
    """Return *tag* without its ``{namespace}`` prefix.

    Comments and processing instructions have a factory function as their
    tag; they have no local name.
    """
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def qualify(name: str, like_tag: str) -> str:
    """Put *name* into the same namespace as *like_tag*."""
    if like_tag.startswith("{"):
        return like_tag[: like_tag.index("}") + 1] + name
    return name


def parent_map(root: ET.Element) -> Dict[ET.Element, ET.Element]:
    return {child: parent for parent in root.iter() for child in parent}


def iter_ancestors(
    element: ET.Element, parents: Dict[ET.Element, ET.Element]
) -> Iterator[ET.Element]:
    """Yield the ancestors of *element*, nearest first."""
    while element in parents:
        element = parents[element]
        yield element


def find_property_group(root: ET.Element) -> ET.Element:
    """Find the property group that declares the target framework.

    Elements named ``TargetFramework`` are taken in document order; the first
    one with a ``PropertyGroup`` ancestor decides, and its nearest such
    ancestor is returned.

    Raises:
        StructuralError: if no ``TargetFramework`` sits inside a
            ``PropertyGroup``.
    """
    parents = parent_map(root)
    for element in root.iter():
        if local_name(element.tag) != TARGET_FRAMEWORK:
            continue
        for ancestor in iter_ancestors(element, parents):
            if local_name(ancestor.tag) == PROPERTY_GROUP:
                return ancestor
    raise StructuralError("no property group contains a target-framework declaration")


def get_or_insert_field(container: ET.Element, name: str, default: str) -> ET.Element:
    """Return the first descendant of *container* named *name*, creating it if needed.

    Side effect: when no such descendant exists, a new ``<name>default</name>``
    element (in the container's namespace) is appended as the last child of
    *container*, indented like its siblings.
    """
    for element in container.iter():
        if element is not container and local_name(element.tag) == name:
            return element

    field = ET.Element(qualify(name, container.tag))
    field.text = default
    children = list(container)
    if children:
        last = children[-1]
        field.tail = last.tail
        if container.text is not None and not container.text.strip():
            last.tail = container.text
    container.append(field)
    logger.debug(f"project_file: created <{name}> with default '{default}'")
    return field


class ProjectDocument:
    """An in-memory project file plus what is needed to write it back unchanged."""

    def __init__(
        self,
        root: ET.Element,
        path: Optional[Path] = None,
        *,
        prolog: str = "",
        epilog: str = "",
        encoding: str = "utf-8",
        bom: bytes = b"",
        newline: str = "\n",
        namespaces: Optional[List[Tuple[str, str]]] = None,
    ):
        self.root = root
        self.path = path
        self.prolog = prolog
        self.epilog = epilog
        self.encoding = encoding
        self.bom = bom
        self.newline = newline
        self.namespaces = namespaces or []

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ProjectDocument":
        """Parse the file at *path*.

        Raises:
            ParseError: if the file is not well-formed XML.
            OSError: if the file cannot be read.
        """
        path = Path(path)
        raw = path.read_bytes()
        return cls.from_bytes(raw, path)

    @classmethod
    def from_bytes(cls, raw: bytes, path: Optional[Path] = None) -> "ProjectDocument":
        try:
            namespaces = _collect_namespaces(raw)
            parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
            root = ET.fromstring(raw, parser=parser)
        except ET.ParseError as e:
            line, column = getattr(e, "position", (None, None))
            raise ParseError(f"not well-formed XML ({e})", path, line, column) from e

        bom, encoding = _detect_bom(raw)
        body = raw[len(bom):]
        if not bom:
            match = _DECLARED_ENCODING.match(body.lstrip())
            encoding = match.group(1).decode("ascii") if match else "utf-8"
        try:
            text = body.decode(encoding)
        except (LookupError, UnicodeDecodeError) as e:
            raise ParseError(f"cannot decode as {encoding} ({e})", path) from e

        prolog = _PROLOG.match(text).group(0)
        epilog = text[_trailer_start(text):]
        newline = "\r\n" if "\r\n" in text else "\n"

        return cls(
            root,
            path,
            prolog=prolog,
            epilog=epilog,
            encoding=encoding,
            bom=bom,
            newline=newline,
            namespaces=namespaces,
        )

    def find_property_group(self) -> ET.Element:
        try:
            return find_property_group(self.root)
        except StructuralError as e:
            e.path = self.path
            raise

    def to_bytes(self) -> bytes:
        for prefix, uri in self.namespaces:
            if re.fullmatch(r"ns\d+", prefix):
                continue
            ET.register_namespace(prefix, uri)
        body = ET.tostring(self.root, encoding="unicode")
        if self.newline != "\n":
            body = body.replace("\n", self.newline)
        text = self.prolog + body + self.epilog
        data = text.encode(self.encoding, "xmlcharrefreplace")
        if self.bom:
            data = self.bom + data
        return data

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the document over *path* (default: where it was loaded from).

        The new content goes to a temporary file in the same directory which
        then replaces the target, so readers never see a half-written file.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("ProjectDocument.save() needs a path for a document not loaded from disk")
        data = self.to_bytes()

        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            if target.exists():
                shutil.copymode(target, tmp_name)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"project_file: wrote {len(data)} bytes to {target}")
        return target


def _collect_namespaces(raw: bytes) -> List[Tuple[str, str]]:
    """Return the ``(prefix, uri)`` declarations of a document, first seen first."""
    seen: List[Tuple[str, str]] = []
    for _event, (prefix, uri) in ET.iterparse(io.BytesIO(raw), events=("start-ns",)):
        if (prefix, uri) not in seen:
            seen.append((prefix, uri))
    return seen


def _detect_bom(raw: bytes) -> Tuple[bytes, str]:
    """Return the byte order mark *raw* starts with and its codec, or ``(b"", "utf-8")``."""
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return bom, encoding
    return b"", "utf-8"


def _trailer_start(text: str) -> int:
    """Index where the content after the root element's end tag begins.

    Whitespace, comments and processing instructions may follow the root
    element; they are peeled off from the end until the root's closing ``>``.
    """
    end = len(text.rstrip())
    while True:
        if text.endswith("-->", 0, end):
            start = text.rfind("<!--", 0, end)
        elif text.endswith("?>", 0, end):
            start = text.rfind("<?", 0, end)
        else:
            return end
        if start < 0:
            return end
        end = len(text[:start].rstrip())
