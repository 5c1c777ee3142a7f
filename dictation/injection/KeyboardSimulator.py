from pynput.keyboard import Controller

from dictation.errors import InjectionFailed

_InvalidCharacter = Controller.InvalidCharacterException


class KeyboardSimulator:
    """ A text sink over pynput's keyboard Controller.
    All keyboard operations are delegated to pynput Controller.

    Example:
        >>> simulator = KeyboardSimulator()
        >>> simulator.inject_text("Hello World")  # Types into active window
    """

    def __init__(self) -> None:
        self._keyboard: Controller = Controller()

    def inject_text(self, text: str) -> None:
        """Type text character by character into the active window.

        The text is typed at the current cursor position in whatever application has focus.

        Args:
            text: The string to type.

        Raises:
            InjectionFailed: pynput could not type one of the characters
        """
        try:
            self._keyboard.type(text)
        except _InvalidCharacter as e:
            raise InjectionFailed(f"Cannot type character at position {e.args[0]}") from e
