"""Schema compiler, resolver graph builder, and engine binding."""

from domainapi.compiler.api import CompiledApi, build_api
from domainapi.compiler.resolvers import build_resolvers
from domainapi.compiler.schema import CompiledSchema, compile_schema

__all__ = ["CompiledApi", "CompiledSchema", "build_api", "build_resolvers", "compile_schema"]
