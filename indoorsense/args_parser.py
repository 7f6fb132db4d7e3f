import argparse

from .config import ExportConfig
from .models.research import StudyCondition
from .utils.coords import Size

indoorsense_parser = argparse.ArgumentParser(
    description="IndoorSense, accessible floor-plan exploration (touch replay)"
)

indoorsense_parser.add_argument(
    "--floor-plan", help="Path to floor-plan json file.", default="data/features.json"
)
indoorsense_parser.add_argument(
    "--participant", help="Participant identifier.", default="P001"
)
indoorsense_parser.add_argument(
    "--condition",
    help="Study condition.",
    type=StudyCondition,
    choices=list(StudyCondition),
    default=StudyCondition.CONTROL,
)
indoorsense_parser.add_argument(
    "--touches",
    help="CSV of scripted touches (x,y,event[,duration][,time]); event is touch, drag, release, tap or overview.",
    default=None,
)
indoorsense_parser.add_argument(
    "--viewport",
    help="Touch surface size as WIDTHxHEIGHT.",
    type=Size.parse,
    default=Size(390.0, 700.0),
)
indoorsense_parser.add_argument(
    "--out",
    help="Directory for exported CSV files.",
    default=ExportConfig.DEFAULT_OUTPUT_DIR,
)

indoorsense_parser.add_argument(
    "--no-speech",
    help="Disable spoken feedback.",
    action="store_true",
    default=False,
)
indoorsense_parser.add_argument(
    "--tones",
    help="Enable feature tones.",
    action="store_true",
    default=False,
)
indoorsense_parser.add_argument(
    "--no-haptics",
    help="Disable haptic patterns.",
    action="store_true",
    default=False,
)

indoorsense_parser.add_argument(
    "--debug",
    help="Enable debug mode.",
    action="store_true",
    default=False,
)

get_args = indoorsense_parser.parse_args
