"""Utilities for handling KeyboardInterrupt in try-except blocks.

Dependencies may be resolved on worker threads. A KeyboardInterrupt caught
there would otherwise only end that worker, so it is forwarded to the main
thread before being re-raised.
"""

import _thread


def handle_keyboard_interrupt_properly(ke: KeyboardInterrupt) -> None:
    """Propagate a KeyboardInterrupt to the main thread and re-raise it.

    Usage:
        try:
            extract(...)
        except KeyboardInterrupt as ke:
            handle_keyboard_interrupt_properly(ke)
        except OSError as e:
            raise ExtractionError(...) from e

    Args:
        ke: The KeyboardInterrupt exception to handle

    Raises:
        KeyboardInterrupt: Always re-raises the exception after handling
    """
    _thread.interrupt_main()
    raise ke
