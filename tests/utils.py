from __future__ import annotations

from enum import Enum

from iniconf import Color, IniSection, Point, Rectangle, Size, UInt, ini_property, ini_section


class OutputFormat(Enum):
    png = 1
    jpg = 2
    bmp = 3


@ini_section("Core", description="Core application settings")
class CoreConfiguration(IniSection):
    """Section touching every kind of property."""

    language = ini_property(
        "Language", str, default="en-US", description="The language in IETF format (e.g. en-US)"
    )
    register_hotkeys = ini_property(
        "RegisterHotkeys", bool, default="True", description="Register the global hotkeys"
    )
    output_format = ini_property(
        "OutputFileFormat", OutputFormat, default="png", description="Default file type"
    )
    jpeg_quality = ini_property("OutputFileJpegQuality", int, default="80")
    retries = ini_property("Retries", UInt, default="3")
    zoom = ini_property("Zoom", float | None)
    last_region = ini_property("LastCapturedRegion", Rectangle | None)
    window_location = ini_property("WindowLocation", Point | None)
    include_plugins = ini_property("IncludePlugins", list[str], description="Plugins to load")
    recent_colors = ini_property("RecentColors", list[Color])
    counters = ini_property("Counters", dict[str, int], description="Usage counters")
    last_value = ini_property("LastValue", object)

    def get_default(self, property_name: str):
        if property_name == "IncludePlugins":
            return ["Core"]
        return None


@ini_section("Editor", description="Editor settings")
class EditorConfiguration(IniSection):
    line_color = ini_property("LineColor", Color, default="255,255,0,0", description="Line colour")
    size = ini_property("EditorSize", Size | None)


@ini_section("Editor")
class OtherEditorConfiguration(IniSection):
    thickness = ini_property("Thickness", int)


@ini_section("Capture")
class CaptureConfiguration(IniSection):
    delay = ini_property("CaptureDelay", int)
    title = ini_property("Title", str)

    def get_default(self, property_name: str):
        if property_name == "CaptureDelay":
            return 100
        return None
