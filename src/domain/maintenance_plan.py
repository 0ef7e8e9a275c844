"""Maintenance Plan catalogue

Read-only reference data used to price new subscriptions.
"""

from decimal import Decimal
from typing import Dict, List
from pydantic import BaseModel, ConfigDict
from src.domain.subscription import BillingCycle


class MaintenancePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    features: List[str]
    price: Decimal
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    support_level: str
    response_time: str
    monthly_hours: int
    backup_frequency: str
    security_updates: bool = True
    performance_optimization: bool = False
    is_popular: bool = False
    is_active: bool = True


MAINTENANCE_PLANS: List[MaintenancePlan] = [
    MaintenancePlan(
        id="basic-maintenance",
        name="Mantenimiento Básico",
        description="Mantenimiento esencial para mantener tu sitio web seguro y actualizado.",
        features=[
            "Actualizaciones de seguridad",
            "Backup semanal",
            "Monitoreo básico",
            "Soporte por email",
            "2 horas de cambios menores",
            "Reporte mensual",
        ],
        price=Decimal("49"),
        support_level="basic",
        response_time="48 horas",
        monthly_hours=2,
        backup_frequency="Semanal",
        performance_optimization=False,
        is_popular=True,
    ),
    MaintenancePlan(
        id="standard-maintenance",
        name="Mantenimiento Estándar",
        description="Mantenimiento completo con optimización de rendimiento y soporte prioritario.",
        features=[
            "Todo del plan Básico",
            "Backup diario",
            "Optimización de rendimiento",
            "Monitoreo avanzado",
            "Soporte prioritario",
            "5 horas de cambios",
            "Reporte detallado",
            "Análisis de tráfico",
        ],
        price=Decimal("99"),
        support_level="standard",
        response_time="24 horas",
        monthly_hours=5,
        backup_frequency="Diario",
        performance_optimization=True,
    ),
    MaintenancePlan(
        id="premium-maintenance",
        name="Mantenimiento Premium",
        description="Servicio completo de mantenimiento con soporte 24/7 y gestión proactiva.",
        features=[
            "Todo del plan Estándar",
            "Soporte 24/7",
            "Gestión proactiva",
            "Optimización continua",
            "10 horas de desarrollo",
            "Consultoría estratégica",
            "Reportes ejecutivos",
            "Acceso directo al equipo",
        ],
        price=Decimal("199"),
        support_level="premium",
        response_time="2 horas",
        monthly_hours=10,
        backup_frequency="Diario + Tiempo real",
        performance_optimization=True,
    ),
]

PLANS_BY_ID: Dict[str, MaintenancePlan] = {plan.id: plan for plan in MAINTENANCE_PLANS}
