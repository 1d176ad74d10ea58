"""Frames, the frame arena, and the dual-mode environment.

Frames live in a `FrameArena` and refer to each other by integer handle, so a
closure that captures a frame containing itself (a recursive local function)
is just an integer pointing back into the arena. Handle 0 is the global frame.

`Environment` is one session's view of the arena: a live stack of active
frame handles plus the scoping mode. The two disciplines differ only in the
order frames are searched:

- lexical: the innermost active frame, then its fixed parent chain;
- dynamic: every active frame on the live stack, most recent first.
"""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set

from .mode import ScopingMode
from .types import ScpClosure, ScpValue, ScopaResourceExhausted, ScopaRuntimeError, ScopaUnboundVariable

GLOBAL = 0


class Frame:
    __slots__ = ("vars", "parent", "kind")

    def __init__(self, parent: Optional[int] = None, kind: str = "let"):
        self.vars: Dict[str, ScpValue] = {}
        self.parent = parent
        self.kind = kind

    def __repr__(self) -> str:
        names = ", ".join(self.vars)
        return f"<{self.kind} frame parent={self.parent} vars=[{names}]>"


class FrameArena:
    """Owns every frame; frames are addressed by their index."""

    def __init__(self) -> None:
        self._frames: List[Frame] = [Frame(parent=None, kind="global")]

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, handle: int) -> Frame:
        return self._frames[handle]

    @property
    def globals(self) -> Frame:
        return self._frames[GLOBAL]

    def allocate(self, parent: Optional[int], kind: str) -> int:
        self._frames.append(Frame(parent=parent, kind=kind))
        return len(self._frames) - 1

    def mark(self) -> int:
        return len(self._frames)

    def references_since(self, mark: int, roots: Iterable[ScpValue] = ()) -> Set[int]:
        """Handles >= *mark* referenced from outside the frames allocated since *mark*.

        Outside means: any frame below the mark, or one of *roots*.
        """
        escaped: Set[int] = set()

        def note(value: ScpValue) -> None:
            if isinstance(value, ScpClosure) and value.frame is not None and value.frame >= mark:
                escaped.add(value.frame)

        for value in roots:
            note(value)

        for frame in self._frames[:mark]:
            if frame.parent is not None and frame.parent >= mark:
                escaped.add(frame.parent)
            for value in frame.vars.values():
                note(value)

        return escaped

    def release_since(self, mark: int, roots: Iterable[ScpValue] = ()) -> bool:
        """Drop every frame allocated since *mark* unless one of them escaped.

        Returns True when frames were released.
        """
        if mark < 1 or mark >= len(self._frames):
            return False

        if self.references_since(mark, roots):
            return False

        del self._frames[mark:]
        return True

    def reset(self) -> None:
        del self._frames[1:]
        self.globals.vars.clear()


class Environment:
    """One evaluation session's live stack over a shared arena."""

    def __init__(self, arena: FrameArena, mode: ScopingMode, max_depth: int):
        self.arena = arena
        self.mode = mode
        self.max_depth = max_depth
        self.stack: List[int] = [GLOBAL]
        self.call_depth = 0

    @property
    def lexical(self) -> bool:
        return self.mode is ScopingMode.LEXICAL

    @property
    def current(self) -> int:
        return self.stack[-1]

    @property
    def depth(self) -> int:
        return len(self.stack)

    def frame(self, handle: Optional[int] = None) -> Frame:
        return self.arena[self.current if handle is None else handle]

    # ---- resolution ----

    def search_order(self) -> Iterator[Frame]:
        """Frames in the order a free name is resolved under this mode."""
        if self.lexical:
            handle: Optional[int] = self.current
            while handle is not None:
                frame = self.arena[handle]
                yield frame
                handle = frame.parent
            return

        for handle in reversed(self.stack):
            yield self.arena[handle]

    def define(self, name: str, value: ScpValue) -> None:
        self.frame().vars[name] = value

    def lookup(self, name: str) -> ScpValue:
        for frame in self.search_order():
            if name in frame.vars:
                return frame.vars[name]

        raise ScopaUnboundVariable(name)

    def assign(self, name: str, value: ScpValue) -> None:
        for frame in self.search_order():
            if name in frame.vars:
                frame.vars[name] = value
                return

        raise ScopaUnboundVariable(name)

    def is_bound(self, name: str) -> bool:
        return any(name in frame.vars for frame in self.search_order())

    def visible_names(self) -> Dict[str, ScpValue]:
        names: Dict[str, ScpValue] = {}

        for frame in self.search_order():
            for name, value in frame.vars.items():
                names.setdefault(name, value)

        return names

    # ---- scope entry / exit ----

    def push_let(self, name: str, value: ScpValue) -> int:
        # Dynamic frames have no fixed parent; the live stack supplies the order.
        parent = self.current if self.lexical else None
        handle = self.arena.allocate(parent, "let")
        self.arena[handle].vars[name] = value
        self.stack.append(handle)
        return handle

    def push_call(self, closure: ScpClosure, bindings: Mapping[str, ScpValue]) -> int:
        if self.call_depth >= self.max_depth:
            raise ScopaResourceExhausted(
                f"Recursion depth exceeded ({self.max_depth} nested calls)", depth=self.call_depth
            )

        if self.lexical:
            # Closures created under dynamic scoping captured nothing: resolve from globals.
            parent: Optional[int] = GLOBAL if closure.frame is None else closure.frame
        else:
            parent = None

        handle = self.arena.allocate(parent, "call")
        self.arena[handle].vars.update(bindings)
        self.stack.append(handle)
        self.call_depth += 1
        return handle

    def _pop_top(self) -> int:
        handle = self.stack.pop()
        if self.arena[handle].kind == "call":
            self.call_depth -= 1
        return handle

    def pop_scope(self, handle: int) -> None:
        if len(self.stack) > 1 and self.stack[-1] == handle:
            self._pop_top()
            return

        if handle == GLOBAL or handle not in self.stack:
            raise ScopaRuntimeError(f"Scope stack corrupted: frame {handle} is not active")

        # Frames above *handle* belong to an exit that was itself interrupted
        # (host recursion limit hit inside a finally block).
        while self._pop_top() != handle:
            pass

    def unwind(self, depth: int = 1) -> None:
        """Pop frames until *depth* remain (the global frame always stays)."""
        depth = max(depth, 1)

        while len(self.stack) > depth:
            self._pop_top()

    def capture(self) -> Optional[int]:
        """Frame handle a closure created here should hold."""
        return self.current if self.lexical else None
