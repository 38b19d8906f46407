"""Prompt builders for recognizing and solving handwritten math."""

RECOGNITION_MAX_CHARS = 10
MAX_EXPLANATION_STEPS = 10


def build_recognition_prompt(max_chars: int = RECOGNITION_MAX_CHARS) -> str:
    """Return the instruction sent alongside the drawn expression."""
    return (
        "Identify the handwritten mathematical expression in this image. "
        "Return only the expression, with no explanation or surrounding text. "
        f"Keep it under {max_chars} characters."
    )


def build_solve_prompt(expression: str) -> str:
    """Return the single-turn instruction for a final numeric answer."""
    return f"Solve this mathematical expression: {expression}. Only respond with the numerical answer."


def build_explain_prompt(max_steps: int = MAX_EXPLANATION_STEPS) -> str:
    """Return the instruction for a numbered, plain-text walkthrough."""
    return (
        "Solve the handwritten mathematical problem in this image step by step. "
        "Start with a brief introduction of the problem. "
        "Number each step as 1., 2., 3. and so on. "
        "Use plain arithmetic symbols (+, -, *, /, ^, =) instead of LaTeX or other markup. "
        "Do not use bullet points or dashes for formatting. "
        f"Use at most {max_steps} steps. "
        "Finish with a short conclusion that states the final answer."
    )
