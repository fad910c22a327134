"""Parser for Go module manifests (``go.mod``).

Reads the subset of the go.mod grammar arcwatch needs:

- Line comments (``// ...``), including the ``// indirect`` marker on
  requirements
- Single-line and parenthesised block forms of ``require``, ``replace``,
  ``exclude``, ``retract``, ``tool``, ``ignore`` and ``godebug``
- The ``module``, ``go`` and ``toolchain`` directives
- Interpreted (``"..."``) and raw (`` `...` ``) quoted strings

Directives other than ``module``, ``go``, ``require`` and ``replace`` are
validated for shape and then ignored.

Typical usage::

    parser = GoModParser()
    mod = parser.parse_file("go.mod")
    for req in mod.requires:
        print(req.path, req.version, req.indirect)
"""

from __future__ import annotations

import re
import json
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from arcwatch.models.modfile import ModFile, ModuleRequirement, ReplaceDirective
from arcwatch.utils import get_logger, safe_read_file
from arcwatch.exceptions import ManifestParseError

_Fail = Callable[[str], ManifestParseError]

_TOKEN_RE = re.compile(
    r'"(?:[^"\\]|\\.)*"'  # interpreted string
    r"|`[^`]*`"  # raw string
    r"|=>"
    r"|[()]"
    r'|(?:[^\s"`()=]|=(?!>))+'
)

SINGLE_VALUE_DIRECTIVES = frozenset({"module", "go", "toolchain"})

BLOCK_DIRECTIVES = frozenset(
    {"require", "replace", "exclude", "retract", "tool", "ignore", "godebug"}
)

KNOWN_DIRECTIVES = SINGLE_VALUE_DIRECTIVES | BLOCK_DIRECTIVES


def _split_comment(line: str) -> Tuple[str, Optional[str]]:
    """Split *line* into code and the text after ``//`` (outside quotes)."""
    quote: Optional[str] = None
    i = 0
    while i < len(line):
        ch = line[i]
        if quote:
            if ch == "\\" and quote == '"':
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ('"', "`"):
            quote = ch
        elif line.startswith("//", i):
            return line[:i], line[i + 2 :]
        i += 1
    return line, None


def _is_indirect(comment: Optional[str]) -> bool:
    """Apply the go toolchain rule for the ``indirect`` marker."""
    if comment is None:
        return False
    text = comment.strip()
    return text == "indirect" or text.startswith("indirect;")


def _unquote(token: str) -> str:
    if token.startswith("`") and token.endswith("`") and len(token) >= 2:
        return token[1:-1]
    if token.startswith('"'):
        try:
            return json.loads(token)
        except ValueError:
            return token.strip('"')
    return token


class GoModParser:
    """Stateless parser turning ``go.mod`` text into a :class:`ModFile`."""

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    def parse_file(self, file_path: Union[str, Path]) -> ModFile:
        """Read and parse a ``go.mod`` file.

        Raises:
            ManifestReadError: The file cannot be read.
            ManifestParseError: The file is not valid go.mod syntax.
        """
        content = safe_read_file(file_path)
        return self.parse_string(content, source_file_path=str(file_path))

    def parse_string(
        self,
        content: str,
        source_file_path: Optional[str] = None,
    ) -> ModFile:
        """Parse go.mod text.

        Args:
            content: Manifest text.
            source_file_path: Display name used in error messages.

        Returns:
            The parsed :class:`ModFile`.

        Raises:
            ManifestParseError: Unknown directive, malformed entry, stray
                ``)`` or unterminated block.

        Example::

            >>> mod = GoModParser().parse_string(
            ...     "module example.com/m\\n"
            ...     "require github.com/x/y v1.0.0 // indirect\\n"
            ... )
            >>> mod.requires[0].indirect
            True
        """
        mod = ModFile(source=source_file_path)
        block: Optional[str] = None
        block_start = 0

        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            code, comment = _split_comment(raw_line)
            tokens = _TOKEN_RE.findall(code)
            if not tokens:
                continue

            def fail(message: str) -> ManifestParseError:
                return ManifestParseError(
                    message,
                    line_number=line_number,
                    line_content=raw_line.strip(),
                    file_path=source_file_path,
                )

            if block is not None:
                if tokens == [")"]:
                    block = None
                    continue
                if "(" in tokens or ")" in tokens:
                    raise fail(f"unexpected parenthesis in {block} block")
                self._apply(mod, block, tokens, comment, line_number, fail)
                continue

            verb, args = tokens[0], tokens[1:]
            if verb not in KNOWN_DIRECTIVES:
                raise fail(f"unknown directive: {verb}")

            if args == ["("]:
                if verb not in BLOCK_DIRECTIVES:
                    raise fail(f"{verb} does not accept a block")
                block = verb
                block_start = line_number
                continue

            if "(" in args or ")" in args:
                raise fail(f"unexpected parenthesis after {verb}")

            self._apply(mod, verb, args, comment, line_number, fail)

        if block is not None:
            raise ManifestParseError(
                f"unterminated {block} block",
                line_number=block_start,
                file_path=source_file_path,
            )

        self.logger.debug(
            "Parsed %d requirement(s) and %d replacement(s)%s",
            len(mod.requires),
            len(mod.replaces),
            f" from {source_file_path}" if source_file_path else "",
        )
        return mod

    def _apply(
        self,
        mod: ModFile,
        verb: str,
        args: List[str],
        comment: Optional[str],
        line_number: int,
        fail: _Fail,
    ) -> None:
        if verb in SINGLE_VALUE_DIRECTIVES:
            if len(args) != 1:
                raise fail(f"usage: {verb} <value>")
            if verb == "module":
                mod.module = _unquote(args[0])
            elif verb == "go":
                mod.go_version = args[0]
            return

        if verb == "require":
            if len(args) != 2:
                raise fail("usage: require module/path v1.2.3")
            mod.requires.append(
                ModuleRequirement(
                    path=_unquote(args[0]),
                    version=_unquote(args[1]),
                    indirect=_is_indirect(comment),
                    line_number=line_number,
                )
            )
            return

        if verb == "replace":
            mod.replaces.append(self._parse_replace(args, line_number, fail))
            return

        if not args:
            raise fail(f"usage: {verb} requires an argument")

    @staticmethod
    def _parse_replace(args: List[str], line_number: int, fail: _Fail) -> ReplaceDirective:
        """Parse ``old [v] => new [v]``."""
        if "=>" not in args:
            raise fail("usage: replace module/path [v1.2.3] => other/module v1.4")

        arrow = args.index("=>")
        left, right = args[:arrow], args[arrow + 1 :]
        if len(left) not in (1, 2) or len(right) not in (1, 2):
            raise fail("usage: replace module/path [v1.2.3] => other/module v1.4")

        return ReplaceDirective(
            old_path=_unquote(left[0]),
            old_version=_unquote(left[1]) if len(left) == 2 else None,
            new_path=_unquote(right[0]),
            new_version=_unquote(right[1]) if len(right) == 2 else None,
            line_number=line_number,
        )
