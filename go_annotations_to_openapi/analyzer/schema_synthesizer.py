"""
Schema synthesizer: turns type descriptors into OpenAPI schema nodes.

Named struct types are expanded into the document's schema table and
referenced with `$ref`. An empty placeholder is registered under the
type's key before its fields are expanded, so a field that leads back to
the same type finds the placeholder and yields a reference instead of
recursing.
"""

from __future__ import annotations

import logging

from ..document.models import Document, SchemaNode
from ..errors import AnnotationError, TypeNotFound
from ..source.nodes import CompilationUnit, FieldDefinition, NominalTypeDefinition
from .name_resolver import dedup_key
from .struct_catalog import StructCatalog
from .tags import FieldTagOptions
from .type_descriptor import PRIMITIVE_TYPES, TypeDescriptor, TypeDescriptorBuilder, TypeKind

logger = logging.getLogger(__name__)

TEMPORAL_SCHEMA = ("string", "date-time")


class SchemaSynthesizer:
    """Builds schema nodes and fills the document's schema table."""

    def __init__(self, document: Document, catalog: StructCatalog, builder: TypeDescriptorBuilder):
        """
        Initialize the synthesizer.

        Args:
            document: The per-run document whose schema table is filled
            catalog: Struct catalog used to look up struct fields
            builder: Type descriptor builder used for field types
        """
        self.document = document
        self.catalog = catalog
        self.builder = builder

    def schema_for_ref(self, type_ref: str, unit: CompilationUnit) -> SchemaNode:
        """Describe a type reference and return its schema."""
        return self.schema_for(self.builder.describe(type_ref, unit))

    def property_for_ref(self, type_ref: str, unit: CompilationUnit) -> SchemaNode:
        """Describe a type reference and return it as a property."""
        return self.property_for(self.builder.describe(type_ref, unit))

    def schema_for(self, descriptor: TypeDescriptor) -> SchemaNode:
        """
        Return the schema of a descriptor.

        Named types are registered in the schema table and only a
        reference is returned; read the body through Document.resolve().
        """
        if descriptor.kind == TypeKind.NOMINAL:
            return self._nominal(descriptor)
        return self.property_for(descriptor)

    def property_for(self, descriptor: TypeDescriptor) -> SchemaNode:
        """Return the property node of a descriptor, used for fields and leaf values."""
        if descriptor.kind == TypeKind.PRIMITIVE:
            type_name, format_name = PRIMITIVE_TYPES[descriptor.name]
            return SchemaNode(type=type_name, format=format_name)

        if descriptor.kind == TypeKind.TEMPORAL:
            type_name, format_name = TEMPORAL_SCHEMA
            return SchemaNode(type=type_name, format=format_name)

        if descriptor.kind == TypeKind.MAP:
            return SchemaNode(type="object", additional_properties={})

        if descriptor.kind == TypeKind.ARRAY:
            return SchemaNode(type="array", items=self.property_for(descriptor.nested))

        return self._nominal(descriptor)

    def _nominal(self, descriptor: TypeDescriptor) -> SchemaNode:
        unit = descriptor.unit
        key, present = dedup_key(descriptor.name, unit, self.document.schemas)
        if present:
            return SchemaNode.reference(key, unit)

        definition = self.catalog.lookup(descriptor.name, unit)
        if definition is None:
            raise TypeNotFound(descriptor.name, unit.import_path, unit.directory)

        # Entries registered while expanding may point back at this key
        registered = set(self.document.schemas)
        placeholder = SchemaNode(origin=unit)
        self.document.schemas[key] = placeholder
        logger.debug("Expanding %s from %s as %s", descriptor.name, unit.import_path, key)

        try:
            self._expand(placeholder, definition)
        except AnnotationError:
            for added in set(self.document.schemas) - registered:
                del self.document.schemas[added]
            raise

        return SchemaNode.reference(key, unit)

    def _expand(self, schema: SchemaNode, definition: NominalTypeDefinition) -> None:
        """Populate a registered placeholder with the struct's fields."""
        schema.type = "object"
        for field_def in definition.fields:
            options = FieldTagOptions.parse(field_def.tag)
            if field_def.is_system:
                if options.description:
                    schema.description = options.description
                continue

            name = options.output_name(field_def.name)
            if name is None:
                continue

            schema.properties[name] = self._field_property(field_def, options, definition.unit)
            if options.required and name not in schema.required:
                schema.required.append(name)

    def _field_property(
        self,
        field_def: FieldDefinition,
        options: FieldTagOptions,
        unit: CompilationUnit,
    ) -> SchemaNode:
        if options.type:
            prop = SchemaNode(type=options.type)
        else:
            prop = self.property_for_ref(field_def.type_ref, unit)

        if options.format:
            prop.format = options.format
        if options.example:
            prop.example = options.example
        if options.description:
            prop.description = options.description
        if options.default:
            prop.default = options.default
        if options.enum:
            prop.enum = list(options.enum)
        if options.extensions:
            prop.extensions.update(options.extensions)
        return prop
