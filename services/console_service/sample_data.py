"""
Development catalog used until the console is wired to a real backend.
"""

from datetime import timedelta
from typing import List

from services.auth_service.models import parse_timestamp, utc_now
from services.console_service.models import (
    BotMetrics, BusinessProcess, BusinessUnit, ProcessMetrics, RpaBot
)

BUSINESS_UNITS = [
    {
        "id": "bu_001", "name": "Finance Department", "code": "FIN",
        "description": "Handles all financial operations, accounting, and budgeting",
        "status": "active", "managerId": "user_001",
        "manager": {"id": "user_001", "fullName": "John Smith", "email": "john.smith@company.com"},
        "processIds": ["proc_001", "proc_002"],
        "metrics": {"totalProcesses": 12, "activeAutomations": 8, "monthlySavings": 15420, "efficiency": 87},
        "createdAt": "2024-01-15T00:00:00Z", "updatedAt": "2024-01-20T00:00:00Z"
    },
    {
        "id": "bu_002", "name": "Human Resources", "code": "HR",
        "description": "Employee management, recruitment, and HR operations",
        "status": "active", "managerId": "user_002",
        "manager": {"id": "user_002", "fullName": "Sarah Johnson", "email": "sarah.j@company.com"},
        "processIds": ["proc_003"],
        "metrics": {"totalProcesses": 8, "activeAutomations": 5, "monthlySavings": 8750, "efficiency": 92},
        "createdAt": "2024-01-10T00:00:00Z", "updatedAt": "2024-01-18T00:00:00Z"
    },
    {
        "id": "bu_003", "name": "Customer Service", "code": "CS",
        "description": "Customer support, ticket management, and service operations",
        "status": "active", "managerId": "user_003",
        "manager": {"id": "user_003", "fullName": "Mike Chen", "email": "mike.chen@company.com"},
        "processIds": ["proc_004"],
        "metrics": {"totalProcesses": 15, "activeAutomations": 10, "monthlySavings": 12300, "efficiency": 78},
        "createdAt": "2024-01-05T00:00:00Z", "updatedAt": "2024-01-22T00:00:00Z"
    },
    {
        "id": "bu_004", "name": "Operations", "code": "OPS",
        "description": "Supply chain, logistics, and operational processes",
        "status": "inactive", "managerId": "user_004",
        "manager": {"id": "user_004", "fullName": "Lisa Wong", "email": "lisa.wong@company.com"},
        "processIds": [],
        "metrics": {"totalProcesses": 6, "activeAutomations": 2, "monthlySavings": 3200, "efficiency": 45},
        "createdAt": "2023-12-20T00:00:00Z", "updatedAt": "2024-01-15T00:00:00Z"
    },
]


def sample_business_units() -> List[BusinessUnit]:
    return [BusinessUnit.from_dict(data) for data in BUSINESS_UNITS]


def sample_business_processes() -> List[BusinessProcess]:
    created = parse_timestamp("2024-01-15T00:00:00Z")
    return [
        BusinessProcess(
            id="proc_001", name="Invoice Processing", code="INV-001", business_unit_id="bu_001",
            category="finance", priority="high", status="active",
            description="Automated invoice validation and posting",
            rpa_bot_ids=["bot_001"],
            metrics=ProcessMetrics(avg_execution_time=4.5, success_rate=96, monthly_executions=1250,
                                   error_rate=4, cost_savings=8200),
            created_at=created, updated_at=created
        ),
        BusinessProcess(
            id="proc_002", name="Bank Reconciliation", code="REC-002", business_unit_id="bu_001",
            category="finance", priority="critical", status="testing",
            description="Daily matching of bank statements against the ledger",
            rpa_bot_ids=["bot_002"],
            metrics=ProcessMetrics(avg_execution_time=12, success_rate=81, monthly_executions=30,
                                   error_rate=19, cost_savings=2100),
            created_at=created, updated_at=created
        ),
        BusinessProcess(
            id="proc_003", name="Employee Onboarding", code="HR-003", business_unit_id="bu_002",
            category="hr", priority="medium", status="active",
            description="Account provisioning and welcome pack for new hires",
            rpa_bot_ids=["bot_003"],
            metrics=ProcessMetrics(avg_execution_time=25, success_rate=88, monthly_executions=40,
                                   error_rate=12, cost_savings=3100),
            created_at=created, updated_at=created
        ),
        BusinessProcess(
            id="proc_004", name="Ticket Triage", code="CS-004", business_unit_id="bu_003",
            category="customer_service", priority="high", status="maintenance",
            description="Routes incoming support tickets to the right queue",
            rpa_bot_ids=["bot_004", "bot_005"],
            metrics=ProcessMetrics(avg_execution_time=1.2, success_rate=73, monthly_executions=5400,
                                   error_rate=27, cost_savings=6400),
            created_at=created, updated_at=created
        ),
    ]


def sample_rpa_bots() -> List[RpaBot]:
    now = utc_now()
    return [
        RpaBot(id="bot_001", name="Invoice Reader", code="BOT-INV-01", technology="ui_path",
               status="running", process_id="proc_001", description="Extracts invoice lines from PDFs",
               metrics=BotMetrics(total_executions=1250, successful_executions=1200, failed_executions=50,
                                  avg_execution_time=270, last_execution_at=now - timedelta(minutes=12))),
        RpaBot(id="bot_002", name="Statement Matcher", code="BOT-REC-01", technology="blue_prism",
               status="failed", process_id="proc_002", description="Matches bank statement lines",
               metrics=BotMetrics(total_executions=30, successful_executions=24, failed_executions=6,
                                  avg_execution_time=720, last_execution_at=now - timedelta(hours=3))),
        RpaBot(id="bot_003", name="Onboarding Assistant", code="BOT-HR-01", technology="microsoft_power_automate",
               status="idle", process_id="proc_003", description="Creates accounts for new employees",
               metrics=BotMetrics(total_executions=40, successful_executions=35, failed_executions=5,
                                  avg_execution_time=1500, last_execution_at=now - timedelta(days=2))),
        RpaBot(id="bot_004", name="Ticket Router", code="BOT-CS-01", technology="python_selenium",
               status="running", process_id="proc_004", description="Classifies and routes tickets",
               metrics=BotMetrics(total_executions=5400, successful_executions=3950, failed_executions=1450,
                                  avg_execution_time=72, last_execution_at=now - timedelta(minutes=2))),
        RpaBot(id="bot_005", name="Ticket Backup Router", code="BOT-CS-02", technology="custom",
               status="idle", process_id="proc_004", description="Fallback router for peak hours"),
    ]
