"""
Error taxonomy and error reporting for Lumen
Typed failures for every stage plus source-aware formatting of reader errors
"""

from typing import List, Optional, Dict
from pyparsing import ParseException
import re


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    if error['line']:
        error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    else:
        error_msg = "Parse error:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    if error['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg.rstrip('\n')


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def extract_expected(exc: ParseException) -> List[str]:
    """Extract expected tokens from exception"""
    expected = []

    # pyparsing only reports expectations through the message text
    msg = str(exc)
    if "Expected" in msg:
        expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(|$)", msg)
        if expected_match:
            expected.append(expected_match.group(1))

    return expected if expected else ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if 0 < line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of line"
    return "end of input"


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    opened = source_text.count('(') + source_text.count('[')
    closed = source_text.count(')') + source_text.count(']')
    if opened > closed:
        suggestions.append(f"Unbalanced parentheses - {opened - closed} list(s) never closed")
    elif closed > opened:
        suggestions.append(f"Unbalanced parentheses - {closed - opened} extra closing bracket(s)")

    if source_text.count('"') % 2 == 1:
        suggestions.append("Unterminated string literal - add a closing '\"'")

    if "{" in got or "}" in got:
        suggestions.append("Use parentheses () instead of braces {} in Lumen")

    if "'" in got:
        suggestions.append("Lumen has no quote syntax - strings use double quotes")

    return suggestions


def enhance_parse_exception_dict(exc: ParseException, source_text: str) -> Dict:
    """Convert pyparsing exception to enhanced Lumen error dict"""
    line_num = exc.lineno
    col_num = exc.column

    context = get_context_lines(source_text, line_num, col_num)
    expected = extract_expected(exc)
    got = extract_got(source_text, line_num, col_num)
    suggestions = generate_suggestions(source_text, got)

    return make_parse_error(
        message=str(exc),
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=expected,
        got=got,
        context=context,
        suggestions=suggestions
    )


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class LumenError(Exception):
    """Base class for every failure raised by Lumen"""
    kind = "LumenError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class LumenParseError(LumenError):
    """ParseFailure: source text or literal tree matches no grammar shape"""
    kind = "ParseFailure"

    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None):
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        super().__init__(message)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions
        )
        text = format_parse_error(error_dict)
        if not self.line:
            text = f"{self.kind}: {text}"
        return text


class LumenRuntimeError(LumenError):
    """Base class for failures raised while evaluating"""
    kind = "RuntimeError"


class UnboundIdentifierError(LumenRuntimeError):
    kind = "UnboundIdentifier"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unbound identifier: {name}")


class TypeMismatchError(LumenRuntimeError):
    kind = "TypeMismatch"


class ArityMismatchError(LumenRuntimeError):
    kind = "ArityMismatch"

    def __init__(self, message: str, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(message)


class DivisionByZeroError(LumenRuntimeError):
    kind = "DivisionByZero"


class NoMatchingPrimitiveError(LumenRuntimeError):
    kind = "NoMatchingPrimitive"

    def __init__(self, name: str, arg_count: int):
        self.name = name
        self.arg_count = arg_count
        super().__init__(f"no primitive '{name}' taking {arg_count} argument(s)")


class LumenUserError(LumenRuntimeError):
    """Raised by the `error` primitive"""
    kind = "UserError"

    def __init__(self, message: str, payload: tuple = ()):
        self.payload = payload
        super().__init__(message)


# ============================================================================
# ERROR HANDLER
# ============================================================================

class LumenErrorHandler:
    """Turns pyparsing failures on a given source into LumenParseError"""
    def __init__(self, source_text: str, filename: str = "<input>"):
        self.source_text = source_text
        self.filename = filename

    def enhance_parse_exception(self, exc: ParseException) -> LumenParseError:
        """Convert pyparsing exception to enhanced Lumen error"""
        error_dict = enhance_parse_exception_dict(exc, self.source_text)
        return LumenParseError(
            message=f"{self.filename}: {error_dict['message']}",
            location=error_dict['location'],
            line=error_dict['line'],
            column=error_dict['column'],
            expected=error_dict['expected'],
            got=error_dict['got'],
            context=error_dict['context'],
            suggestions=error_dict['suggestions']
        )
