"""
Command Dispatcher

Core command execution system behind every @event route.
Implements the APPLICATION SERVICE LAYER between the FastHTML routes and
the reactive entities.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Tuple, Type

from datastar_py import ServerSentEventGenerator as SSE
from datastar_py.consts import ElementPatchMode
from datastar_py.fastapi import DatastarResponse
from fastcore.xml import FT, to_xml
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from .utils import cast_param, form_value
from .uow import UnitOfWork
from .bus import InProcessBus, EventBus
from .datastar import is_datastar_request, extract_datastar_payload
from ..core.entity import Entity
from ..core.events import DatastarPayload, ElementPatch, EventInfo
from ..core.signals import EventMethodDescriptor, event_path
from ..errors import ReelCartError
from ..models import Snackbar

logger = logging.getLogger(__name__)


def diff_signals(before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return only the signals that changed between two snapshots.

    Namespaced snapshots (``{"Cart": {...}}``) are compared one level down so
    a single changed field is sent as ``{"Cart": {"total": ...}}``.
    """
    changed = {}
    for key, value in after.items():
        old = before.get(key)
        if isinstance(value, dict) and isinstance(old, dict):
            nested = {k: v for k, v in value.items() if old.get(k) != v or k not in old}
            if nested:
                changed[key] = nested
        elif old != value or key not in before:
            changed[key] = value
    return changed


def error_snackbar(error: Exception) -> Snackbar:
    if isinstance(error, ReelCartError):
        return Snackbar(title=error.title, message=str(error), position="top", variant="error")
    return Snackbar(title="Something went wrong", message="Please try again.", position="top", variant="error")


class Dispatcher(ABC):
    """
    Base dispatcher class for handling entity event routing and execution.

    This is the core orchestrator that:
    1. Discovers @event methods on entity classes
    2. Creates route handlers for web frameworks
    3. Executes commands via call_event
    4. Converts results to appropriate responses
    """

    def __init__(self, uow: UnitOfWork = None, bus: EventBus = None):
        self.namespace_routes: Dict[str, str] = {}
        self.bus = bus or InProcessBus()
        self.uow = uow or UnitOfWork(self.bus)

    @abstractmethod
    def _register_route(self, router, path: str, handler: Callable, event_info: EventInfo):
        """Register a route with the framework router."""

    def discover_events(self, entity_class: Type[Entity]) -> Dict[str, EventInfo]:
        """Discover all @event methods on an entity class."""
        events = {}
        for name, attr in vars(entity_class).items():
            if isinstance(attr, EventMethodDescriptor):
                events[name] = attr._event_info
        return events

    def include_entity(self, router, entity_class: Type[Entity], base_path: str = "") -> None:
        """
        Register a single entity class with the router.

        Args:
            router: Framework router
            entity_class: Entity class containing @event methods
            base_path: Optional base path for routes
        """
        namespace = entity_class.signal_namespace()
        for event_name, event_info in self.discover_events(entity_class).items():
            event_route = event_info.path or event_path(namespace, event_name)
            path = f"/{base_path.strip('/')}{event_route}" if base_path else event_route
            self.namespace_routes[path] = namespace
            handler = self._create_route_handler(entity_class, event_name, event_info)
            self._register_route(router, path, handler, event_info)
            logger.debug("Registered %s %s -> %s.%s", event_info.method, path, entity_class.__name__, event_name)

    def include_entities(self, router, entity_classes: Optional[List[Type[Entity]]] = None, base_path: str = ""):
        """Register multiple entity classes with the router."""
        if not entity_classes:
            entity_classes = Entity.__subclasses__()
        for entity_class in entity_classes:
            self.include_entity(router, entity_class, base_path)

    def _create_route_handler(self, entity_class: Type[Entity], event_name: str, event_info: EventInfo) -> Callable:
        """
        Create a route handler function for an entity event.
        Base implementation - can be overridden by framework-specific dispatchers.
        """
        namespace = entity_class.signal_namespace()

        async def handler(request: Request):
            """Route handler that executes entity events via dispatcher."""
            datastar = is_datastar_request(request)
            try:
                entity = entity_class.get(request)
                event_function = self._get_event_function(entity_class, event_name)
                before = entity.signals
                args = await self._fix_args(event_info, request, namespace)
                new_entity, command_record = await self.call_event(entity, event_function, request, *args)
                # Streamed events run while the response is consumed and commit at its end
                if not _is_stream(command_record["result"]):
                    await self.uow.commit(new_entity, command_record)
                return await self.command_to_response(command_record, new_entity, request, before)
            except HTTPException:
                raise
            except ReelCartError as e:
                logger.warning("%s.%s rejected: %s", entity_class.__name__, event_name, e)
                if datastar:
                    return DatastarResponse(self._error_stream(e))
                return JSONResponse({'success': False, 'error': str(e)}, status_code=400)
            except Exception as e:
                logger.exception("Error executing %s.%s", entity_class.__name__, event_name)
                if datastar:
                    return DatastarResponse(self._error_stream(e))
                return JSONResponse({'success': False, 'error': f"Error executing {event_name}"}, status_code=500)

        handler._event_info = event_info
        handler._entity_class = entity_class
        return handler

    def _get_event_function(self, entity_class: Type[Entity], event_name: str) -> Callable:
        """Get the undecorated event function from the entity class."""
        event_function = vars(entity_class)[event_name]
        if isinstance(event_function, EventMethodDescriptor):
            return event_function.original_method
        return event_function

    async def _fix_args(self, event_info: EventInfo, request: Request, namespace: str) -> List[Any]:
        """Resolve every event parameter except `self` from the request."""
        params = list(event_info.signature.parameters.items())[1:]
        payload = await extract_datastar_payload(request, namespace)
        return [await _find_param(request, name, p, payload) for name, p in params]

    async def call_event(self, entity: Entity, event_function: Callable, request: Request, *resolved_args, **resolved_kwargs) -> Tuple[Any, Dict]:
        """This function implements the command dispatcher pattern for executing events."""
        event_info = event_function._event_info
        result = event_function(entity, *resolved_args, **resolved_kwargs)
        if inspect.isawaitable(result):
            result = await result

        # If the method returned a new entity state, use it; otherwise use the original
        new_entity = result if isinstance(result, type(entity)) else entity

        command_record = {
            "entity": f"{entity.__class__.__name__}:{entity.id}",
            "event": event_info.name,
            "args": resolved_args,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "result": result,
            "event_info": event_info,
        }

        return new_entity, command_record

    async def command_to_response(self, command_record: Dict[str, Any], entity: Entity, request: Request, before: Optional[Dict[str, Any]] = None) -> Any:
        """
        Convert command execution result to appropriate HTTP response.

        - Datastar requests get an SSE stream of signal and element patches
        - API requests (Accept: application/json) get the entity state
        - Anything else gets the raw result

        Generator results are committed only once fully consumed without error.
        """
        result = command_record.get('result')
        event_info = command_record.get('event_info')

        if is_datastar_request(request):
            selector = event_info.selector if event_info else None
            merge_mode = event_info.merge_mode if event_info else 'outer'
            return DatastarResponse(self._create_sse_stream(result, entity, before or {}, selector, merge_mode, command_record))

        items = None
        if _is_stream(result):
            items = await _drain(result)
            await self.uow.commit(entity, command_record)

        if 'application/json' in request.headers.get('accept', ''):
            return JSONResponse({
                'success': True,
                'entity': entity.model_dump(mode="json"),
                'command': command_record['event'],
            })

        if items is not None:
            result = tuple(item for item in items if not isinstance(item, Entity)) or None
        if result is None:
            return f"Command {command_record['event']} executed successfully"
        return result

    async def _create_sse_stream(
        self,
        result: Any,
        entity: Entity,
        before: Dict[str, Any],
        selector: str = None,
        merge_mode: str = 'outer',
        command_record: Optional[Dict[str, Any]] = None,
    ) -> AsyncGenerator[str, None]:
        """Create Server-Sent Event stream for Datastar responses."""
        sent = before
        try:
            # Send whatever the event changed before it returned
            changed = diff_signals(sent, entity.signals)
            if changed:
                yield SSE.patch_signals(changed)
            sent = entity.signals

            if inspect.isasyncgen(result):
                async for item in result:
                    for sse_event in self._handle_stream_item(item, entity, sent, selector, merge_mode):
                        yield sse_event
                    sent = entity.signals
            elif inspect.isgenerator(result):
                for item in result:
                    for sse_event in self._handle_stream_item(item, entity, sent, selector, merge_mode):
                        yield sse_event
                    sent = entity.signals
            elif result is not None and result is not entity:
                event = self._fragment_event(result, selector, merge_mode)
                if event:
                    yield event

            if command_record is not None and _is_stream(result):
                await self.uow.commit(entity, command_record)
        except Exception as e:
            if isinstance(e, ReelCartError):
                logger.warning("Stream for %s rejected: %s", entity.id, e)
            else:
                logger.exception("Error while streaming %s", entity.id)
            self._auto_persist_entity(entity)
            for sse_event in self._error_events(e):
                yield sse_event

    def _handle_stream_item(self, item: Any, entity: Entity, sent: Dict[str, Any], selector: str = None, merge_mode: str = 'outer'):
        """Handle a single item from a generator stream."""
        # Auto-persist entity changes after each yield
        self._auto_persist_entity(entity)

        changed = diff_signals(sent, entity.signals)
        if changed:
            yield SSE.patch_signals(changed)

        if isinstance(item, Entity):
            if item is not entity:
                self._auto_persist_entity(item)
                yield SSE.patch_signals(item.signals)
            return

        event = self._fragment_event(item, selector, merge_mode)
        if event:
            yield event

    async def _error_stream(self, error: Exception) -> AsyncGenerator[str, None]:
        for sse_event in self._error_events(error):
            yield sse_event

    def _error_events(self, error: Exception):
        yield self._fragment_event(error_snackbar(error))

    def _auto_persist_entity(self, entity: Entity) -> None:
        """Auto-persist entity if configured to do so."""
        if entity.auto_persist:
            entity.save()

    def _fragment_event(self, item: Any, selector: str = None, merge_mode: str = 'outer') -> Optional[str]:
        """Create a properly formatted SSE element patch event."""
        if isinstance(item, ElementPatch):
            selector, merge_mode, item = item.selector, item.mode, item.content

        fragment = self._render_fragment(item)
        if not fragment:
            return None
        return SSE.patch_elements(fragment, selector=selector, mode=ElementPatchMode(merge_mode))

    def _render_fragment(self, item: Any) -> Optional[str]:
        """
        Render an item to an HTML fragment string.

        Args:
            item: FT component, object with __ft__, list of those, or a string

        Returns:
            HTML fragment string or None if not renderable
        """
        if item is None or item is True or item is False:
            return None

        if isinstance(item, (list, tuple)):
            rendered = [self._render_fragment(o) for o in item]
            return "".join(r for r in rendered if r) or None

        if hasattr(item, '__ft__') or isinstance(item, FT):
            return to_xml(item)

        if isinstance(item, (str, bytes)):
            return item.decode() if isinstance(item, bytes) else item

        return None


async def _find_param(req: Request, arg: str, p: inspect.Parameter, datastar: DatastarPayload):
    """
    Resolve one event parameter.

    Priority: injected specials, query parameters, form/JSON body,
    Datastar signals, then the parameter default.
    """
    anno = p.annotation
    empty = inspect.Parameter.empty

    if arg.lower() in ('request', 'req') or anno is Request:
        return req
    if arg.lower() == 'datastar' or anno is DatastarPayload:
        return datastar
    if arg.lower() == 'session':
        return req.scope.get('session', {})

    value = None
    if arg in req.query_params:
        value = req.query_params.getlist(arg)
        value = value[0] if len(value) == 1 else value

    if value is None and req.method != 'GET':
        try:
            value = await form_value(req, arg)
        except (ValueError, HTTPException):
            value = None

    if value is None and arg in datastar:
        value = datastar[arg]

    if value is None:
        if p.default is empty:
            raise HTTPException(400, f"Missing required field: {arg}")
        return p.default

    if anno is empty:
        return value
    try:
        return cast_param(anno, value)
    except (TypeError, ValueError):
        raise HTTPException(400, f"Invalid value for {arg}: {value!r}") from None


def _is_stream(result: Any) -> bool:
    return inspect.isasyncgen(result) or inspect.isgenerator(result)


async def _drain(result: Any) -> List[Any]:
    """Run a generator event to completion, collecting what it yielded."""
    if inspect.isasyncgen(result):
        return [item async for item in result]
    return list(result)
