"""
Lifecycle hooks for decorated documents.

Hooks are plain (or async) methods marked with ``@before_save`` or
``@after_save``. They are collected once, when the class is decorated.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Tuple, TypeVar

F = TypeVar('F', bound=Callable[..., Any])


def before_save(func: F) -> F:
    """
    Decorator to mark a method as a before_save hook.

    Called before the document is written. Returning ``False`` vetoes the
    save: nothing is written and the instance is returned unchanged. Only
    ``False`` itself vetoes; ``None`` and other falsy values (``0``, ``""``)
    let the save go ahead.

    Example:
        >>> class Person(Document):
        ...     @before_save
        ...     def require_name(self):
        ...         return bool(self.name)
    """
    setattr(func, '_is_before_save_hook', True)  # type: ignore[attr-defined]
    return func


def after_save(func: F) -> F:
    """
    Decorator to mark a method as an after_save hook.

    Called after the document was written and marked persisted.

    Example:
        >>> class Person(Document):
        ...     @after_save
        ...     async def announce(self):
        ...         await publish("person.saved", self.pk)
    """
    setattr(func, '_is_after_save_hook', True)  # type: ignore[attr-defined]
    return func


async def _call(hook: Callable[[Any], Any], instance: Any) -> Any:
    result = hook(instance)
    if inspect.isawaitable(result):
        result = await result
    return result


@dataclass(frozen=True)
class LifecycleHooks:
    """Hooks a model declared, resolved at decoration time"""
    before_save: Tuple[Callable[[Any], Any], ...] = ()
    after_save: Tuple[Callable[[Any], Any], ...] = ()

    @classmethod
    def collect(cls, model: type) -> "LifecycleHooks":
        before = []
        after = []

        for attr_name in dir(model):
            if attr_name.startswith('__'):
                continue
            attr = getattr(model, attr_name, None)
            if not callable(attr):
                continue
            if getattr(attr, '_is_before_save_hook', False):
                before.append(attr)
            elif getattr(attr, '_is_after_save_hook', False):
                after.append(attr)

        if not before and not after:
            return NO_HOOKS

        return cls(before_save=tuple(before), after_save=tuple(after))

    async def run_before_save(self, instance: Any) -> bool:
        """Run before_save hooks in order. False when one of them vetoed."""
        for hook in self.before_save:
            if await _call(hook, instance) is False:
                return False
        return True

    async def run_after_save(self, instance: Any) -> None:
        for hook in self.after_save:
            await _call(hook, instance)


NO_HOOKS = LifecycleHooks()
