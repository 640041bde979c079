import logging

logger = logging.getLogger(__name__)


class ToolRegistry:
    def __init__(self):
        self.tools = {}
        self.tools_lowercase_map = {}  # Maps lowercase names to actual names

    def register_tool(self, name, tool):
        # Tool names are unique regardless of case
        lowercase_name = name.lower()
        if lowercase_name in self.tools_lowercase_map:
            raise ValueError(f"Tool '{name}' is already registered (as '{self.tools_lowercase_map[lowercase_name]}').")

        self.tools[name] = tool
        self.tools_lowercase_map[lowercase_name] = name
        logger.debug("Registered tool: %s", name)

    def get_registered_tools(self):
        return list(self.tools.keys())

    def get_tool(self, name):
        if not name:
            return None

        # First try exact match
        if name in self.tools:
            return self.tools[name]

        # Then try case-insensitive match
        actual_name = self.tools_lowercase_map.get(name.lower())
        if actual_name:
            return self.tools[actual_name]

        return None
