"""
Differential test harness for the robot table simulator.

Keeps an independent reference robot, mirrors every command to the robot under
test, and reports commands and reference status to the log sink so the two can
be compared outside this process.
"""
