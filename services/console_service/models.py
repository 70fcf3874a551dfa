"""
Console entity models: business units, business processes and RPA bots.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from services.auth_service.models import parse_timestamp, utc_now


class BusinessUnitStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class ProcessCategory(str, Enum):
    FINANCE = "finance"
    HR = "hr"
    OPERATIONS = "operations"
    CUSTOMER_SERVICE = "customer_service"
    IT = "it"
    COMPLIANCE = "compliance"
    OTHER = "other"


class ProcessPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ProcessStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TESTING = "testing"
    MAINTENANCE = "maintenance"
    DEPRECATED = "deprecated"


class RpaTechnology(str, Enum):
    UI_PATH = "ui_path"
    AUTOMATION_ANYWHERE = "automation_anywhere"
    BLUE_PRISM = "blue_prism"
    MICROSOFT_POWER_AUTOMATE = "microsoft_power_automate"
    PYTHON_SELENIUM = "python_selenium"
    CUSTOM = "custom"


class RpaStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"
    MAINTENANCE = "maintenance"
    DISABLED = "disabled"


TECHNOLOGY_LABELS: Dict[RpaTechnology, str] = {
    RpaTechnology.UI_PATH: "UiPath",
    RpaTechnology.AUTOMATION_ANYWHERE: "AA",
    RpaTechnology.BLUE_PRISM: "Blue Prism",
    RpaTechnology.MICROSOFT_POWER_AUTOMATE: "Power Automate",
    RpaTechnology.PYTHON_SELENIUM: "Python",
    RpaTechnology.CUSTOM: "Custom",
}


@dataclass
class ManagerRef:
    """Manager summary embedded in a business unit"""
    id: str
    full_name: str
    email: str = ""


@dataclass
class BusinessUnitMetrics:
    total_processes: int = 0
    active_automations: int = 0
    monthly_savings: float = 0.0
    efficiency: int = 0  # 0-100


@dataclass
class BusinessUnit:
    """Business unit of the organization"""
    id: str
    name: str
    code: str
    status: BusinessUnitStatus
    manager_id: str
    description: Optional[str] = None
    manager: Optional[ManagerRef] = None
    process_ids: List[str] = field(default_factory=list)
    metrics: BusinessUnitMetrics = field(default_factory=BusinessUnitMetrics)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.status = BusinessUnitStatus(self.status)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BusinessUnit':
        manager = data.get("manager")
        metrics = data.get("metrics") or {}
        return cls(
            id=str(data["id"]),
            name=data["name"],
            code=data["code"],
            description=data.get("description"),
            status=data["status"],
            manager_id=str(data.get("managerId", "")),
            manager=ManagerRef(
                id=str(manager["id"]),
                full_name=manager["fullName"],
                email=manager.get("email", "")
            ) if manager else None,
            process_ids=list(data.get("processIds", [])),
            metrics=BusinessUnitMetrics(
                total_processes=metrics.get("totalProcesses", 0),
                active_automations=metrics.get("activeAutomations", 0),
                monthly_savings=metrics.get("monthlySavings", 0),
                efficiency=metrics.get("efficiency", 0)
            ),
            created_at=parse_timestamp(data.get("createdAt")) or utc_now(),
            updated_at=parse_timestamp(data.get("updatedAt")) or utc_now(),
        )


@dataclass
class ProcessMetrics:
    avg_execution_time: float = 0.0  # minutes
    success_rate: float = 0.0  # 0-100
    monthly_executions: int = 0
    error_rate: float = 0.0  # 0-100
    cost_savings: float = 0.0  # monthly


@dataclass
class BusinessProcess:
    """Business process owned by a business unit"""
    id: str
    name: str
    code: str
    business_unit_id: str
    category: ProcessCategory
    priority: ProcessPriority
    status: ProcessStatus
    description: Optional[str] = None
    rpa_bot_ids: List[str] = field(default_factory=list)
    metrics: ProcessMetrics = field(default_factory=ProcessMetrics)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.category = ProcessCategory(self.category)
        self.priority = ProcessPriority(self.priority)
        self.status = ProcessStatus(self.status)


@dataclass
class BotConfiguration:
    retry_attempts: int = 3
    timeout_minutes: int = 30
    max_memory_mb: int = 1024
    execution_schedule: Optional[str] = None  # cron expression


@dataclass
class BotMetrics:
    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    avg_execution_time: float = 0.0  # seconds
    last_execution_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    last_failure_at: Optional[datetime] = None


@dataclass
class RpaExecutionLog:
    """One recorded bot execution"""
    id: str
    bot_id: str
    status: str  # success | failed | timeout | cancelled
    message: str
    execution_time: float
    executed_at: datetime
    records_processed: Optional[int] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class RpaBot:
    """RPA bot automating a business process"""
    id: str
    name: str
    code: str
    technology: RpaTechnology
    status: RpaStatus
    process_id: str
    description: Optional[str] = None
    configuration: BotConfiguration = field(default_factory=BotConfiguration)
    metrics: BotMetrics = field(default_factory=BotMetrics)
    recent_logs: List[RpaExecutionLog] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.technology = RpaTechnology(self.technology)
        self.status = RpaStatus(self.status)

    @property
    def technology_label(self) -> str:
        return TECHNOLOGY_LABELS.get(self.technology, self.technology.value)
