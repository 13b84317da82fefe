"""
Travel calculators: trip times and time zones, trip costs and budgets,
group expenses and hiking gear.
"""
