"""
Employment calculators: notice and probation periods, contract durations,
shift hours, timesheets and paid time off.
"""
