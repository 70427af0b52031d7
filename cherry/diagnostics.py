"""
XML diagnostic dumps.

Written on request (`--diagnose(...)`) under a diagnostics root directory:

    <root>/lexer/<file>.xml                    token stream of one file
    <root>/grammar_attributes/FIRSTS.xml       FIRST set of every non-terminal
    <root>/command_line/raised_flags.xml       flags raised on the command line
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, Union

from .driver.flags import RuntimeFlag
from .grammar import FirstSets
from .lexer import Token

logger = logging.getLogger(__name__)

INDENT = "    "


def _write(root: ET.Element, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    tree = ET.ElementTree(root)
    ET.indent(tree, space=INDENT)
    tree.write(path, encoding="utf-8", xml_declaration=True)
    logger.debug("Wrote diagnostic %s", path)
    return path


class DiagnosticExporter:
    """Writes XML diagnostics below `root`."""

    def __init__(self, root: Union[str, Path] = "diagnostics"):
        self.root = Path(root)
        # dump file name -> source file it was written for
        self._token_dumps: Dict[str, str] = {}

    def dump_tokens(self, tokens: Iterable[Token], filename: str) -> Path:
        """
        Write the token stream of `filename` to `<root>/lexer/<base name>.xml`.

        A second source with the same base name from another directory gets
        `<base name>-2.xml`, then `-3`, and so on. The `file` attribute of the
        root element always holds the full source path.
        """
        element = ET.Element("tokens", file=filename)
        for token in tokens:
            node = ET.SubElement(element, "token")
            ET.SubElement(node, "type", value=token.type.name)
            ET.SubElement(node, "name", value=token.lexeme)
            ET.SubElement(node, "line", value=str(token.line))
            ET.SubElement(node, "column", value=str(token.column))
        return _write(element, self.root / "lexer" / f"{self._dump_name(filename)}.xml")

    def _dump_name(self, filename: str) -> str:
        base = Path(filename).name
        name, count = base, 1
        while self._token_dumps.get(name, filename) != filename:
            count += 1
            name = f"{base}-{count}"
        self._token_dumps[name] = filename
        return name

    def dump_first_sets(self, first_sets: FirstSets) -> Path:
        # Terminal names lower-cased are valid tag names: "." is <dot/>, "ε" is <epsilon/>.
        element = ET.Element("firsts", type="Cherry")
        for nonterminal in first_sets:
            node = ET.SubElement(element, nonterminal.name)
            for terminal in sorted(first_sets[nonterminal], key=lambda t: t.index):
                ET.SubElement(node, terminal.name.lower(), lexeme=terminal.lexeme)
        return _write(element, self.root / "grammar_attributes" / "FIRSTS.xml")

    def dump_flags(self, flags: Iterable[RuntimeFlag]) -> Path:
        element = ET.Element("flags")
        for flag in sorted(flags, key=lambda f: f.value):
            ET.SubElement(element, "flag", name=flag.value)
        return _write(element, self.root / "command_line" / "raised_flags.xml")
