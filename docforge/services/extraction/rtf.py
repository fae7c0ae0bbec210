"""RTF text extraction via a small control-word tokenizer."""

import re

from docforge.utils import collapse_blank_lines

# \word[-N][delimiting space] | \'hh | \<symbol>
_CONTROL_WORD = re.compile(r"\\([a-zA-Z]+)(-?\d+)? ?")
_HEX_ESCAPE = re.compile(r"\\'([0-9a-fA-F]{2})")

# Groups whose content is metadata, not document text
SKIPPED_DESTINATIONS = {
    "fonttbl",
    "colortbl",
    "stylesheet",
    "info",
    "pict",
    "listtable",
    "listoverridetable",
    "rsidtbl",
    "generator",
    "themedata",
    "colorschememapping",
    "latentstyles",
    "datastore",
    "xmlnstbl",
    "fldinst",
    "object",
}

CONTROL_WORD_TEXT = {
    "par": "\n\n",
    "line": "\n",
    "tab": "\t",
    "emdash": "—",
    "endash": "–",
    "bullet": "•",
    "lquote": "‘",
    "rquote": "’",
    "ldblquote": "“",
    "rdblquote": "”",
}

CONTROL_SYMBOL_TEXT = {
    "\\": "\\",
    "{": "{",
    "}": "}",
    "~": " ",
    "_": "-",
    "-": "",
    "\n": "\n\n",
    "\r": "\n\n",
}


def _decode_hex_byte(value: str) -> str:
    byte = bytes([int(value, 16)])
    try:
        return byte.decode("cp1252")
    except UnicodeDecodeError:
        return chr(byte[0])


class RtfExtractor:
    """Extract plain text from RTF markup."""

    def extract(self, content: bytes) -> str:
        return self.to_text(content.decode("utf-8", errors="replace"))

    def to_text(self, rtf: str) -> str:
        """
        Convert RTF markup to plain text.

        Paragraph controls become blank lines, line breaks become newlines,
        hexadecimal and unicode escapes are decoded, metadata destination
        groups are skipped and group braces are stripped.
        """
        out: list[str] = []
        depth = 0
        skip_depth: int | None = None
        group_start = False
        uc_stack = [1]
        pending_skip = 0
        i = 0
        n = len(rtf)

        while i < n:
            ch = rtf[i]

            if ch == "{":
                depth += 1
                uc_stack.append(uc_stack[-1])
                group_start = True
                pending_skip = 0
                i += 1
                continue

            if ch == "}":
                if skip_depth is not None and depth <= skip_depth:
                    skip_depth = None
                depth = max(0, depth - 1)
                if len(uc_stack) > 1:
                    uc_stack.pop()
                group_start = False
                pending_skip = 0
                i += 1
                continue

            if ch == "\\":
                hex_match = _HEX_ESCAPE.match(rtf, i)
                if hex_match:
                    i = hex_match.end()
                    group_start = False
                    if pending_skip:
                        pending_skip -= 1
                    elif skip_depth is None:
                        out.append(_decode_hex_byte(hex_match.group(1)))
                    continue

                word_match = _CONTROL_WORD.match(rtf, i)
                if word_match:
                    i = word_match.end()
                    word = word_match.group(1)
                    param = word_match.group(2)
                    at_group_start = group_start
                    group_start = False
                    pending_skip = 0

                    if at_group_start and word in SKIPPED_DESTINATIONS and skip_depth is None:
                        skip_depth = depth
                        continue
                    if skip_depth is not None:
                        continue

                    if word == "uc" and param is not None:
                        uc_stack[-1] = max(0, int(param))
                    elif word == "u" and param is not None:
                        code = int(param)
                        if code < 0:
                            code += 65536
                        out.append(chr(code))
                        pending_skip = uc_stack[-1]
                    elif word in CONTROL_WORD_TEXT:
                        out.append(CONTROL_WORD_TEXT[word])
                    continue

                # Control symbol
                symbol = rtf[i + 1] if i + 1 < n else ""
                i += 2
                at_group_start = group_start
                group_start = False
                pending_skip = 0
                if symbol == "*" and at_group_start and skip_depth is None:
                    skip_depth = depth
                    continue
                if skip_depth is None:
                    out.append(CONTROL_SYMBOL_TEXT.get(symbol, ""))
                continue

            i += 1
            group_start = False
            if ch in "\r\n":
                continue
            if pending_skip:
                pending_skip -= 1
                continue
            if skip_depth is None:
                out.append(ch)

        return collapse_blank_lines("".join(out)).strip()
