# ORM models package: radiology reports and the three feature tables
