"""Minimal publish/subscribe dispatcher.

Each camera instance owns one dispatcher; listeners are never shared
between instances.

カメラインスタンスごとに保持する最小限のイベントディスパッチャ。
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

Event = Mapping[str, Any]
Listener = Callable[[Event], None]


class EventDispatcher:
    """Register listeners by event type and dispatch events to them.

    イベント種別ごとにリスナーを登録し、イベントを配信する。
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event_type: str, listener: Listener) -> None:
        """Subscribe ``listener`` to ``event_type``.

        ``listener`` を ``event_type`` に登録する。

        Args:
            event_type: Event name to listen for.
                購読するイベント名。
            listener: Callable receiving the event mapping. A listener
                already registered for ``event_type`` is not added again.
                イベント辞書を受け取る呼び出し可能オブジェクト。
                登録済みのリスナーは重複登録されない。
        """
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)

    def off(self, event_type: str, listener: Listener) -> None:
        """Unsubscribe ``listener`` from ``event_type``.

        ``listener`` の登録を解除する。

        Args:
            event_type: Event name the listener was registered for.
                登録時のイベント名。
            listener: Listener to remove. Unknown listeners are ignored.
                解除するリスナー（未登録なら何もしない）。
        """
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def has_listener(self, event_type: str, listener: Listener) -> bool:
        """Return whether ``listener`` is registered for ``event_type``.

        ``listener`` が ``event_type`` に登録済みかどうかを返す。

        Args:
            event_type: Event name.
                イベント名。
            listener: Listener to look up.
                確認するリスナー。

        Returns:
            ``True`` if the listener is registered.
                登録済みなら ``True``。
        """
        return listener in self._listeners.get(event_type, ())

    def dispatch(self, event: Event) -> None:
        """Call every listener registered for ``event["type"]``.

        Listeners run in registration order against a snapshot of the list,
        so a listener may unsubscribe itself while being dispatched.

        ``event["type"]`` に登録された全リスナーを登録順に呼び出す。

        Args:
            event: Event mapping with at least a ``"type"`` key.
                少なくとも ``"type"`` キーを持つイベント辞書。

        Raises:
            KeyError: If ``event`` has no ``"type"`` key.
                ``"type"`` キーがない場合。
        """
        for listener in list(self._listeners.get(event["type"], ())):
            listener(event)
