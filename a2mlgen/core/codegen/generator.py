"""
Module Generator
================

Generate a Python module from a resolved schema using Jinja2 templates.
The module holds a pydantic model or IntEnum per named type, decode and
encode methods over the generic tree, and the canonical text constant.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import jinja2

from a2mlgen.config.logging import get_logger
from a2mlgen.config.settings import get_settings
from a2mlgen.core.codegen import expressions
from a2mlgen.core.codegen.canonical import render_canonical_text
from a2mlgen.models.schema import (
    EnumType,
    Schema,
    StructType,
    TaggedStructType,
    TaggedUnionType,
)
from a2mlgen.models.results import GeneratedModule
from a2mlgen.utils.diagnostics import A2mlError

logger = get_logger(__name__)


class CodeGenerationError(A2mlError):
    """Exception raised when module generation fails."""

    pass


def _docstring(text: str) -> str:
    """Python string literal usable as a docstring."""
    if '"""' in text or "\\" in text or text.endswith('"'):
        return repr(text)
    return f'"""{text}"""'


def _field_call(default: str, description: Optional[str]) -> str:
    args = [default]
    if description:
        args.append(f"description={description!r}")
    return f"_pydantic.Field({', '.join(args)})"


class ModuleGenerator:
    """Jinja2-based Python module generator."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.logger: Any = logger.bind(stage="generator")
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment."""
        template_dir = Path(__file__).parent / "templates"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        self.env.filters["pyrepr"] = repr
        self.env.filters["docstring"] = _docstring

    def generate(self, schema: Schema) -> GeneratedModule:
        """
        Generate the Python module for a schema.

        Args:
            schema: Resolved schema

        Returns:
            GeneratedModule with source and canonical text

        Raises:
            CodeGenerationError: If template rendering fails
        """
        canonical_text = render_canonical_text(schema)
        try:
            template = self.env.get_template("module.py.j2")
            source = template.render(**self._prepare_context(schema, canonical_text))
        except jinja2.TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            self.logger.error("Module generation failed", error=error_msg)
            raise CodeGenerationError(error_msg) from e

        self.logger.info(
            "Module generation completed", specification=schema.name, source_length=len(source)
        )
        return GeneratedModule(
            name=schema.name,
            source=source,
            text_constant=schema.text_constant,
            canonical_text=canonical_text,
        )

    def _prepare_context(self, schema: Schema, canonical_text: str) -> Dict[str, Any]:
        return {
            "name": schema.name,
            "header": self.settings.module_header,
            "types": [self._type_view(schema.types[name]) for name in schema.order],
            "text_constant": schema.text_constant,
            "text_lines": canonical_text.splitlines(keepends=True),
        }

    def _doc(self, text: Optional[str]) -> Optional[str]:
        return text if self.settings.emit_docstrings else None

    # ------------------------------------------------------------------
    # Per-type views consumed by the template
    # ------------------------------------------------------------------

    def _type_view(self, named: Any) -> Dict[str, Any]:
        view: Dict[str, Any] = {
            "kind": named.kind,
            "name": named.name,
            "alias": expressions.class_alias(named.name),
            "doc": self._doc(named.doc),
        }
        if isinstance(named, StructType):
            view["fields"] = self._struct_fields(named)
        elif isinstance(named, TaggedStructType):
            view["fields"] = self._tagged_fields(named)
        elif isinstance(named, TaggedUnionType):
            view["variants"] = self._variants(named)
        elif isinstance(named, EnumType):
            view["members"] = [
                {
                    "name": variant.name,
                    "tag": variant.tag,
                    "value": variant.value,
                    "comments": (self._doc(variant.doc) or "").splitlines(),
                }
                for variant in named.variants
            ]
        return view

    def _struct_fields(self, named: StructType) -> List[Dict[str, str]]:
        fields = []
        for index, member in enumerate(named.members):
            context = f"{named.name}.{member.name}"
            fields.append(
                {
                    "name": member.name,
                    "annotation": expressions.annotation(member.item),
                    "field": _field_call("...", self._doc(member.doc)),
                    "decode": expressions.decode_expr(member.item, f"children[{index}]", context),
                    "encode": expressions.encode_expr(member.item, f"self.{member.name}"),
                }
            )
        return fields

    def _tagged_fields(self, named: TaggedStructType) -> List[Dict[str, str]]:
        return [
            {
                "name": entry.name,
                "tag": entry.tag,
                "multiplicity": expressions.multiplicity_literal(entry),
                "annotation": expressions.entry_annotation(entry),
                "field": _field_call(expressions.entry_default(entry), self._doc(entry.doc)),
                "decode": expressions.entry_decode(entry, named.name),
                "encode": expressions.entry_encode(entry, f"self.{entry.name}"),
            }
            for entry in named.entries
        ]

    def _variants(self, named: TaggedUnionType) -> List[Dict[str, Optional[str]]]:
        return [
            {
                "name": variant.class_name,
                "alias": expressions.class_alias(variant.class_name),
                "tag": variant.tag,
                "doc": self._doc(variant.doc),
                "annotation": expressions.annotation(variant.item) if variant.item else None,
                "field": _field_call("...", self._doc(variant.doc)),
                "decode": expressions.variant_decode(variant, named.name),
                "encode": expressions.variant_encode(variant),
            }
            for variant in named.variants
        ]


def generate_module(schema: Schema) -> GeneratedModule:
    """
    Generate the Python module for a resolved schema.

    Args:
        schema: Schema produced by the resolver

    Returns:
        GeneratedModule with source, text constant name and canonical text
    """
    return ModuleGenerator().generate(schema)
