"""
SRM Cmdlets - Interactive Prompts

Confirmation gate for high-impact actions such as starting or stopping
a recovery plan.
"""

from getpass import getpass


def text_prompt(prompt="> ", mask=False):
    """
    Prompt the user for input.
    Supports masking input for sensitive values.
    """
    if mask:
        return getpass(prompt)
    return input(prompt)


def confirm_action(message: str, confirm: bool = True, prompt=None) -> bool:
    """
    Ask the user to confirm a high-impact action.

    Args:
        message: What is about to happen
        confirm: False when confirmation is suppressed (e.g. --quiet);
            the action is then approved without asking
        prompt: Input function, defaults to text_prompt

    Returns:
        True if the action may proceed
    """
    if not confirm:
        return True

    prompt = prompt or text_prompt
    answer = prompt(f"{message}\nContinue? [y/N] ")
    return answer.strip().lower() in ('y', 'yes')
