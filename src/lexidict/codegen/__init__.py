"""Code generation: template sub-compiler and Python module generator.

Python 3.13+.
"""

from .generator import DictGenerator, GeneratedDictionary, generate, variant_class_name
from .template import CompiledTemplate, compile_template, parse_placeholder
from .writer import CodeWriter

__all__ = [
    "CodeWriter",
    "CompiledTemplate",
    "DictGenerator",
    "GeneratedDictionary",
    "compile_template",
    "generate",
    "parse_placeholder",
    "variant_class_name",
]
