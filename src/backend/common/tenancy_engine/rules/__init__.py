from .rta_arrears_21_days import RTA_S55_1A_ARREARS_21_DAYS
from .rta_three_strikes import RTA_S55_1AA_THREE_STRIKES
from .rta_strike_due import RTA_S55_1AA_STRIKE_DUE
