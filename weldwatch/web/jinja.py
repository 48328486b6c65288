from fastapi.templating import Jinja2Templates

from weldwatch.services.report import TEMPLATES_DIR, format_voltage

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["volts"] = format_voltage
