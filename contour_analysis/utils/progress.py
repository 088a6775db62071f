"""Progress helpers with a compact unicode bar."""

from __future__ import annotations

from typing import Iterable, Optional, TypeVar

from tqdm import tqdm

T = TypeVar("T")

_BAR_CHARS = "⣀⣄⣆⣇⣧⣶⣷⣿"
_DEFAULT_BAR_FORMAT = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]"


def iter_progress(
    iterable: Iterable[T],
    *,
    desc: Optional[str] = None,
    total: Optional[int] = None,
    enabled: bool = True,
) -> Iterable[T]:
    if not enabled:
        return iterable
    return tqdm(
        iterable,
        desc=desc,
        total=total,
        ascii=_BAR_CHARS,
        bar_format=_DEFAULT_BAR_FORMAT,
        leave=True,
        dynamic_ncols=True,
    )


def progress_print(*args: object, enabled: bool = True, **kwargs: object) -> None:
    """Print without disrupting an active tqdm bar; honours sep, end and file."""
    if enabled:
        sep = kwargs.get("sep")
        end = kwargs.get("end")
        tqdm.write(
            (" " if sep is None else str(sep)).join(str(arg) for arg in args),
            file=kwargs.get("file"),
            end="\n" if end is None else str(end),
        )
        return
    print(*args, **kwargs)
