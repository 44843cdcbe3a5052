import functools
import inspect
import urllib.parse


# Parameters injected by the dispatcher, never part of a generated action URL
SPECIAL_PARAMS = {'request', 'req', 'datastar', 'session'}
SPECIAL_ANNOTATIONS = {'Request', 'DatastarPayload'}


def event_path(namespace: str, method_name: str) -> str:
    """Route path shared by URL generation and route registration."""
    return f"/{namespace.lower()}/{method_name}"


class SignalDescriptor:
    """Return `$Namespace.field` on the class, real value on an instance."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name

    def __get__(self, instance, owner):
        #  class access  →  owner is the model class, instance is None
        if instance is None:
            ns = owner.signal_namespace()
            return f"${ns}.{self.field_name}" if owner.use_namespace else f"${self.field_name}"

        #  instance access  →  behave like a normal attribute
        return getattr(instance, self.field_name)


class EventMethodDescriptor:
    """Generate action strings for @event methods to use with Datastar, but allow direct execution."""

    def __init__(self, method_name: str, owner, original_method):
        self.method_name = method_name
        self.owner = owner
        self.original_method = original_method
        # Preserve the original event info
        self._event_info = getattr(original_method, '_event_info', None)

    def __get__(self, instance, owner):
        """Handle descriptor access - return bound method for instances, self for class access."""
        if instance is None:
            return self
        return functools.partial(self.original_method, instance)

    def __call__(self, *args, **kwargs):
        """Execute the original method when given an entity, otherwise build a Datastar action."""
        if args and isinstance(args[0], self.owner):
            return self.original_method(*args, **kwargs)
        return self.action(*args, **kwargs)

    @property
    def path(self) -> str:
        if self._event_info and self._event_info.path:
            return self._event_info.path
        return event_path(self.owner.signal_namespace(), self.method_name)

    def _param_names(self):
        names = []
        if not self._event_info:
            return names
        for name, param in list(self._event_info.signature.parameters.items())[1:]:  # Skip 'self'
            if name.lower() in SPECIAL_PARAMS:
                continue
            anno = param.annotation
            if anno is not inspect.Parameter.empty and getattr(anno, '__name__', None) in SPECIAL_ANNOTATIONS:
                continue
            names.append(name)
        return names

    def action(self, *args, **kwargs) -> str:
        """Build `@verb('/path?query')` for a Datastar attribute."""
        http_method = self._event_info.method.lower() if self._event_info else "get"

        params = dict(zip(self._param_names(), args))
        params.update({k: v for k, v in kwargs.items() if v is not None})

        if params:
            query_string = urllib.parse.urlencode(params, doseq=True)
            return f"@{http_method}('{self.path}?{query_string}')"
        return f"@{http_method}('{self.path}')"
