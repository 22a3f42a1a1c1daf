"""
Formatting engines module

Provides the built-in formatting engines and the registry they are
looked up from.
"""

from logbus.formatters.base_formatter import FormattingEngine
from logbus.formatters.default_formatter import DefaultFormatter
from logbus.formatters.rich_text_formatter import RichTextFormatter
from logbus.formatters.xml_formatter import XMLFormatter
from logbus.formatters.html_formatter import HTMLFormatter
from logbus.formatters.native_formatter import NativeMessageFormatter
from logbus.formatters.registry import FormattingRegistry


def builtin_formatting_engines():
    """Fresh instances of the built-in engines, in registration order."""
    return [
        DefaultFormatter(),
        RichTextFormatter(),
        XMLFormatter(),
        HTMLFormatter(),
        NativeMessageFormatter(),
    ]


__all__ = [
    "FormattingEngine",
    "DefaultFormatter",
    "RichTextFormatter",
    "XMLFormatter",
    "HTMLFormatter",
    "NativeMessageFormatter",
    "FormattingRegistry",
    "builtin_formatting_engines",
]
