from decimal import Decimal

REQUIRED_FOREIGN_DAYS = 330
PRO_RATA_QUANTUM = Decimal("0.0001")

MODE_US_PERIODS = "US_PERIODS"
MODE_FOREIGN_PERIODS = "FOREIGN_PERIODS"
VALID_MODES = (MODE_US_PERIODS, MODE_FOREIGN_PERIODS)

INPUT_SCHEMA = "calculator_input"
OUTPUT_SCHEMA = "calculator_output"

APP_NAME = "FEIE Window Optimizer"
DISCLAIMER = "For informational use only. Not legal or tax advice."

# Tax years whose +/- one year coverage, and every 12-month window in it,
# stay inside the calendar `datetime.date` can represent.
MIN_TAX_YEAR_DATE = "0002-01-01"
MAX_TAX_YEAR_DATE = "9997-12-31"
