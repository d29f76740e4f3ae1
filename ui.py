from asciimatics.widgets import Frame, Layout, Divider, Button, DropdownList, CheckBox, Label

from tools import Tool

# NOTE: renamed to avoid clashing with Frame.palette attribute.
class ColorPalette:
    """
    A color palette widget.
    """
    def __init__(self, frame, palette, on_color_change):
        self.frame = frame
        self.on_color_change = on_color_change
        self.colors = list(palette)

        layout = Layout([1] * len(self.colors))
        self.frame.add_layout(layout)
        for i, (name, value) in enumerate(self.colors):
            button = Button(
                name[:1],
                on_click=lambda c=value: self._select_color(c)
            )

            layout.add_widget(button, i)

    def _select_color(self, color):
        self.on_color_change(color)

class ToolSelector:
    """
    A dropdown list of the drawing tools.
    """

    def __init__(self, frame, on_tool_change):
        self.frame = frame
        self.on_tool_change = on_tool_change

        layout = Layout([1])
        self.frame.add_layout(layout)

        options = [(f"{i + 1} {tool.value}", tool) for i, tool in enumerate(Tool)]

        def _on_change():
            if self.on_tool_change:
                self.on_tool_change(self.dropdown.value)

        self.dropdown = DropdownList(options, label="Tool:", on_change=_on_change)
        layout.add_widget(self.dropdown)

class UIFrame(Frame):
    """
    The side panel: tool picker, palette, fill toggle and key help.
    """
    def __init__(self, screen, editor):
        super(UIFrame, self).__init__(
            screen,
            screen.height,
            screen.width // 4,
            x=screen.width - screen.width // 4,
            y=0,
            has_border=True,
            name="UI"
        )
        self.editor = editor
        # Track whether the UI currently has focus (e.g., the mouse is over the UI region)
        self.has_focus: bool = False
        self._syncing = False

        self.tool_selector = ToolSelector(self, self._on_tool_change)
        self.color_palette = ColorPalette(self, editor.config.palette, editor.set_color)
        layout = Layout([1])
        self.add_layout(layout)
        layout.add_widget(Divider())
        self.fill_box = CheckBox("Fill rectangles", on_change=self._on_fill_change)
        layout.add_widget(self.fill_box)
        layout.add_widget(Divider())
        for text in (
            "^Z undo  ^Y redo",
            "^S save  ^E png",
            "^N new  c colour",
            "f fill  g grid",
            "+/- zoom  q quit",
        ):
            layout.add_widget(Label(text))
        self.fix()
        self.sync(editor)

    def _on_tool_change(self, tool):
        if not self._syncing:
            self.editor.select_tool(tool)

    def _on_fill_change(self):
        if not self._syncing:
            self.editor.set_fill_shapes(self.fill_box.value)

    def sync(self, editor):
        """Reflects editor state changed by key bindings back into the widgets."""
        self._syncing = True
        try:
            self.tool_selector.dropdown.value = editor.tool
            self.fill_box.value = editor.tools.state.fill_shapes
        finally:
            self._syncing = False
