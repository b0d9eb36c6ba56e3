"""Result markers and colors."""

SUCCESS_MARK = "✔︎"
FAILURE_MARK = "✖︎"

RESULT_COLORS: dict[bool, str] = {
    True: "green",
    False: "red bold",
}


def styled_result(success: bool) -> str:
    color = RESULT_COLORS[success]
    mark = SUCCESS_MARK if success else FAILURE_MARK
    return f"[{color}]{mark}[/{color}]"
