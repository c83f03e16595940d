"""QueryService: parse, compile, and run attribute queries."""

from __future__ import annotations

import logging

from nodefacade.domain.query import QueryParseError, format_tree, parse_query, to_query_text
from nodefacade.domain.query.ast import Clause
from nodefacade.infrastructure.database.compiler import CompiledQuery, UnsupportedColumnError
from nodefacade.services.base import STORE_ERRORS, BaseService
from nodefacade.services.contracts import ExplainResultData, QueryResultData, dump_validated
from nodefacade.services.details import DetailService
from nodefacade.services.render import RenderService
from nodefacade.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


class QueryService(BaseService):
    """Boolean attribute queries over the node store."""

    def execute(self, text: str) -> ServiceResult:
        """Run *text* and return the matching ids with their projections.

        Predicates naming an unsupported core column are dropped with a
        warning (or rejected when ``[query] strict_columns`` is set).
        """
        op = "query"
        prepared = self._prepare(op, text)
        if isinstance(prepared, ServiceResult):
            return prepared
        clause, compiled = prepared

        ids: list[int] = []
        if compiled.statement is not None:
            try:
                ids = self._facade.store.execute_ids(compiled.statement)
            except STORE_ERRORS as exc:
                return self._store_fault(op, exc, query=text)

        details = DetailService(self._facade)
        renderer = RenderService(self._facade)
        items = []
        for node_id in ids:
            loaded = details.load_by_id(node_id)
            if not loaded.ok:
                return loaded.model_copy(update={"op": op})
            items.append(renderer.project(loaded.data["details"]))

        logger.debug("Query matched %d nodes", len(ids))
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                QueryResultData,
                {"query": to_query_text(clause), "count": len(ids), "ids": ids, "items": items},
            ),
            warnings=list(compiled.warnings),
        )

    def explain(self, text: str) -> ServiceResult:
        """Parse and compile *text* without touching the store."""
        op = "explain"
        prepared = self._prepare(op, text)
        if isinstance(prepared, ServiceResult):
            return prepared
        clause, compiled = prepared
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                ExplainResultData,
                {
                    "query": to_query_text(clause),
                    "tree": format_tree(clause),
                    "sql": compiled.sql(self._facade.engine.dialect),
                    "parameters": compiled.parameters,
                    "matches_nothing": compiled.matches_nothing,
                },
            ),
            warnings=list(compiled.warnings),
        )

    def _prepare(self, op: str, text: str) -> tuple[Clause, CompiledQuery] | ServiceResult:
        try:
            clause = parse_query(text)
        except QueryParseError as exc:
            return self._failure(
                op, ErrorCode.PARSE_ERROR, str(exc), line=exc.line, column=exc.column
            )
        try:
            compiled = self._facade.compiler.compile(clause)
        except UnsupportedColumnError as exc:
            return self._failure(
                op,
                ErrorCode.UNSUPPORTED_COLUMN,
                str(exc),
                field=exc.field_name,
                predicate=exc.predicate,
            )
        return clause, compiled
