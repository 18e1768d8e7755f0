"""EPF Payroll package.

Feature modules (attendance, shifts, payroll, payments, ...) turn employee
clock-in/out data into Salary records and EPF/ETF Payment batches. A thin
Flask controller layer sits on top of the service/repository layers.
"""
