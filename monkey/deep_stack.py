"""Run deeply recursive work on a thread with a large stack.

The parser and the evaluator both recurse on the Python stack, roughly a
dozen frames per Monkey call. `call_with_deep_stack` raises the recursion
limit and gives the work a thread whose C stack can hold that many
frames, then puts both settings back. A RecursionError raised by the
work is re-raised in the calling thread.
"""

import sys
import threading
from typing import Any, Callable, List

RECURSION_LIMIT = 50_000
STACK_SIZE = 512 * 1024 * 1024


def call_with_deep_stack(fn: Callable[..., Any], *args: Any) -> Any:
    result: List[Any] = []
    raised: List[BaseException] = []

    def target() -> None:
        try:
            result.append(fn(*args))
        except BaseException as e:
            raised.append(e)

    old_limit = sys.getrecursionlimit()
    old_stack_size = threading.stack_size()
    threading.stack_size(STACK_SIZE)
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
    try:
        thread = threading.Thread(target=target, name='monkey-eval')
        thread.start()
        thread.join()
    finally:
        threading.stack_size(old_stack_size)
        sys.setrecursionlimit(old_limit)

    if raised:
        raise raised[0]
    return result[0]
