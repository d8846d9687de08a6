"""Repository decorator for standardizing DB operations.

Wraps repository methods with:
- Structured logging with context and timing information
- Classification of SQLAlchemy and driver overflow errors, re-raised as ``StoreFailure``
- Pass-through of domain errors such as ``NotFound``
"""

import asyncio
from collections.abc import Callable, Coroutine
import functools
import time
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import (
    DatabaseError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError,
)

from bookforge.config import get_logger
from bookforge.domain.exceptions import BookForgeError, NotFound, StoreFailure

P = ParamSpec("P")
T = TypeVar("T")

logger = get_logger(__name__)


def db_operation(operation_name: str | None = None):
    """Decorate repository methods with consistent logging and error handling.

    Args:
        operation_name: Optional name for the operation (defaults to function name)

    Example:
        @db_operation("get_user")
        async def get_user(self, user_id: int) -> User:
            ...
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        func_name = operation_name or func.__name__

        if not asyncio.iscoroutinefunction(func):
            raise TypeError(
                f"db_operation can only be used with async functions, but {func_name} is not async",
            )

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            start_time = time.perf_counter()
            repo_name = args[0].__class__.__name__ if args else "Repository"
            context = _build_log_context(args[1:], kwargs)

            def elapsed_ms() -> float:
                return (time.perf_counter() - start_time) * 1000

            try:
                logger.trace(
                    f"DB operation starting: {repo_name}.{func_name}",
                    operation=func_name,
                    **context,
                )

                result = await func(*args, **kwargs)

                logger.trace(
                    f"DB operation completed: {repo_name}.{func_name}",
                    operation=func_name,
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                return result

            except NotFound as e:
                # Expected outcome for lookups, not a store failure
                logger.debug(
                    f"DB record not found: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise

            except BookForgeError:
                raise

            except IntegrityError as e:
                logger.warning(
                    f"DB integrity error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise StoreFailure(func_name, f"Constraint violated during {func_name}") from e

            except TimeoutError as e:
                logger.error(
                    f"DB timeout error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise StoreFailure(func_name, f"Timed out during {func_name}") from e

            except OperationalError as e:
                logger.error(
                    f"DB operational error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise StoreFailure(func_name) from e

            except DatabaseError as e:
                logger.error(
                    f"DB error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise StoreFailure(func_name) from e

            except OverflowError as e:
                # sqlite3 raises this unwrapped for ints it cannot bind
                logger.error(
                    f"DB parameter out of range: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise StoreFailure(func_name, f"Value out of range during {func_name}") from e

            except SQLAlchemyError as e:
                logger.error(
                    f"SQLAlchemy error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise StoreFailure(func_name) from e

        return wrapper

    return decorator


def _build_log_context(args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
    """Build a logging context from the call arguments.

    Positional ids are logged as ``arg0``, ``arg1``...; keyword arguments keep
    their names. Only simple scalar values are kept.
    """
    context: dict[str, Any] = {
        f"arg{index}": value
        for index, value in enumerate(args)
        if isinstance(value, int | str) and not isinstance(value, bool)
    }
    context.update(
        {
            k: v
            for k, v in kwargs.items()
            if not k.startswith("_") and isinstance(v, int | str | None)
        }
    )
    return context
