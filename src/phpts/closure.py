"""Breadth-first generation of an entity and everything it depends on.

The traversal is driven by two injected callables:

- ``load_entity(name)`` returns an :class:`EntityDescriptor` for a
  namespace-qualified (or global) name, or raises
  :class:`EntityNotFoundError`. Any other exception is treated as a load
  failure and propagates to the caller.
- ``render(entity, extraction)`` returns the output text for one entity.

Results are keyed by short name because each entity becomes one
``<ShortName>.ts`` file. Two entities sharing a short name cannot both be
written; the first one discovered is kept and the collision is recorded.
"""

import logging
from collections import deque
from typing import Callable

from phpts.errors import EntityNotFoundError
from phpts.extractor import extract as extract_entity
from phpts.models import EntityDescriptor, ExtractionResult, GenerationResult

logger = logging.getLogger(__name__)

EntityLoader = Callable[[str], EntityDescriptor]
EntityRenderer = Callable[[EntityDescriptor, ExtractionResult], str]
EntityExtractor = Callable[[EntityDescriptor], ExtractionResult]


def candidate_names(name: str, written: str, referrer: EntityDescriptor) -> list[str]:
    """List the qualified names a dependency may resolve to, most specific first.

    Args:
        name: Short name of the dependency
        written: The name as written in the type expression
        referrer: Entity whose field references the dependency

    Returns:
        Candidate names without duplicates
    """
    candidates = []

    if "\\" in written:
        candidates.append(written)
        alias, _, rest = written.partition("\\")
        if alias in referrer.uses:
            candidates.append(f"{referrer.uses[alias]}\\{rest}")
        if referrer.namespace:
            candidates.append(f"{referrer.namespace}\\{written}")

    if name in referrer.uses:
        candidates.append(referrer.uses[name])
    if referrer.namespace:
        candidates.append(f"{referrer.namespace}\\{name}")
    candidates.append(name)

    return list(dict.fromkeys(candidates))


def resolve_dependency(
    name: str,
    written: str,
    referrer: EntityDescriptor,
    load_entity: EntityLoader
) -> EntityDescriptor | None:
    """Load a dependency of ``referrer``, or return None if no candidate exists."""
    for candidate in candidate_names(name, written, referrer):
        try:
            return load_entity(candidate)
        except EntityNotFoundError:
            continue
    return None


def generate_one(
    name: str,
    load_entity: EntityLoader,
    render: EntityRenderer,
    extract: EntityExtractor = extract_entity
) -> str:
    """Render a single entity without following its dependencies."""
    entity = load_entity(name)
    return render(entity, extract(entity))


def generate_closure(
    root_name: str,
    load_entity: EntityLoader,
    render: EntityRenderer,
    extract: EntityExtractor = extract_entity
) -> GenerationResult:
    """Render ``root_name`` and every entity reachable from it.

    Each entity is visited at most once (keyed by qualified name), so cyclic
    references terminate. Dependencies that cannot be loaded are skipped and
    listed in ``result.unresolved``; the referencing field still uses the
    short name as its type.

    Args:
        root_name: Qualified name of the starting entity
        load_entity: Loader, raises EntityNotFoundError for unknown names
        render: Renders one entity from its descriptor and extraction result
        extract: Dependency extractor, defaults to :func:`phpts.extractor.extract`

    Returns:
        GenerationResult mapping short name to rendered text

    Raises:
        EntityNotFoundError: If the root entity cannot be loaded
    """
    result = GenerationResult()

    root = load_entity(root_name)
    queue = deque([root])
    visited = {root.qualified_name}
    origins: dict[str, str] = {}  # short name -> qualified name that produced it

    while queue:
        entity = queue.popleft()

        kept = origins.get(entity.short_name)
        if kept is not None:
            logger.warning(
                "Skipping %s: short name %s is already generated from %s",
                entity.qualified_name, entity.short_name, kept
            )
            result.collisions.append((entity.short_name, kept, entity.qualified_name))
            continue

        extraction = extract(entity)
        result[entity.short_name] = render(entity, extraction)
        origins[entity.short_name] = entity.qualified_name
        logger.debug("Generated %s", entity.qualified_name)

        for name in extraction.dependencies:
            written = extraction.written_names.get(name, name)
            dependency = resolve_dependency(name, written, entity, load_entity)

            if dependency is None:
                logger.debug("Dependency %s of %s not found, skipping", name, entity.qualified_name)
                if name not in result.unresolved:
                    result.unresolved.append(name)
                continue

            if dependency.qualified_name not in visited:
                visited.add(dependency.qualified_name)
                queue.append(dependency)

    return result
