"""Utilities to split window titles into application identity."""

from __future__ import annotations

from typing import Callable

from .models import Window, Winfo

SEPARATOR = " - "

_CHROME = "Google Chrome"
_SLACK = "Slack"


def parse_window_title(name: str) -> Winfo:
    """Heuristically decompose a window title into app, sub-app and title.

    ``"Inbox - Gmail - Google Chrome"`` becomes app ``Google Chrome`` with
    sub-app ``Gmail``; Slack puts its name first, everyone else last.
    """
    fields = name.split(SEPARATOR)
    if len(fields) == 1:
        return Winfo(title=name)

    first = fields[0].strip()
    last = fields[-1].strip()
    if last == _CHROME:
        return Winfo(
            app=_CHROME,
            sub_app=fields[-2].strip(),
            title=SEPARATOR.join(fields[:-2]),
        )
    if first == _SLACK:
        return Winfo(app=_SLACK, sub_app=SEPARATOR.join(fields[1:]).strip())
    return Winfo(app=last, title=SEPARATOR.join(fields[:-1]))


def window_label(window: Window) -> str:
    return window.name


def app_label(window: Window) -> str:
    info = parse_window_title(window.name)
    return info.app or info.sub_app or info.title or window.name


LABEL_FUNCS: dict[str, Callable[[Window], str]] = {
    "app": app_label,
    "window": window_label,
}
