import datetime
import logging
import os
import pprint
import traceback
from typing import Optional

logger = logging.getLogger("emoji_counter.exception_manager")

SENSITIVE_KEYWORDS = ('token', 'password', 'secret', 'auth')


def _mask(name: str, value):
    return "********" if any(keyword in name.lower() for keyword in SENSITIVE_KEYWORDS) else value


def _format_vars(var_dict: dict) -> dict:
    """Format frame variables, expanding plain objects one level and masking secrets."""
    formatted_vars = {}
    for var_name, var_value in var_dict.items():
        repr_str = repr(var_value)
        is_default_object = repr_str.startswith('<') and 'object at 0x' in repr_str

        if is_default_object and hasattr(var_value, '__dict__'):
            formatted_vars[var_name] = {
                '__type__': str(type(var_value)),
                '__dict__': {k: _mask(k, v) for k, v in var_value.__dict__.items()}
            }
        else:
            formatted_vars[var_name] = _mask(var_name, var_value)
    return formatted_vars


def describe_frames(tb) -> str:
    """Render the locals of every frame in a traceback."""
    state = ""
    current_tb = tb
    while current_tb:
        frame = current_tb.tb_frame
        state += (
            f"\n--- Frame: {frame.f_code.co_name} in {frame.f_code.co_filename} "
            f"at line {current_tb.tb_lineno} ---\n"
        )
        try:
            state += pprint.pformat(_format_vars(frame.f_locals), indent=2, width=120)
        except Exception as e:
            state += f"  [Could not format locals: {e}]"
        state += "\n"
        current_tb = current_tb.tb_next
    return state


def create_detailed_error_log(log_dir, command_name, exc_type, exc_value, tb) -> Optional[str]:
    """
    Write an exception to a unique file with the full traceback and frame locals.

    Returns:
        Path of the written log file, or None if it could not be written
    """
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_file = os.path.join(log_dir, f"error_{timestamp}.log")

    traceback_str = "".join(traceback.format_exception(exc_type, exc_value, tb))
    variable_state_str = (
        f"Error at {timestamp} in command {command_name}\n"
        f"--- VARIABLE STATE (FULL STACK) ---\n"
        f"{describe_frames(tb)}"
    )

    try:
        os.makedirs(log_dir, exist_ok=True)
        with open(log_file, "w", encoding="utf-8") as f:
            f.write("--- UNCAUGHT EXCEPTION LOG ---\n\n")
            f.write(traceback_str)
            f.write("\n")
            f.write(variable_state_str)

        logger.error(f"Uncaught exception. Detailed log saved to: {log_file}")
        return log_file

    except OSError as e:
        logger.warning(f"Error writing to log file: {e}")
        logger.warning(f"Original traceback:\n{traceback_str}")
        return None
