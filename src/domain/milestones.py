"""Order milestone schedule

Every order starts with the same four checkpoints. Status changes complete
them through :func:`apply_status_to_milestones`.
"""

from datetime import datetime, timedelta
from typing import List
from src.domain.order import MilestoneStatus, OrderMilestone, OrderStatus

ORDER_CONFIRMED = "Pedido Confirmado"
DEVELOPMENT_STARTED = "Desarrollo Iniciado"
FIRST_REVIEW = "Primera Revisión"
FINAL_DELIVERY = "Entrega Final"

# title, description, days until due (None = estimated delivery), deliverables
MILESTONE_TEMPLATES = [
    (
        ORDER_CONFIRMED,
        "El pedido ha sido confirmado y el pago procesado",
        0,
        ["Confirmación de pedido", "Factura"],
    ),
    (
        DEVELOPMENT_STARTED,
        "El equipo ha comenzado a trabajar en tu proyecto",
        2,
        ["Plan de proyecto", "Asignación de equipo"],
    ),
    (
        FIRST_REVIEW,
        "Primera versión lista para revisión del cliente",
        7,
        ["Prototipo inicial", "Documentación"],
    ),
    (
        FINAL_DELIVERY,
        "Proyecto completado y entregado al cliente",
        None,
        ["Proyecto finalizado", "Manual de usuario", "Archivos fuente"],
    ),
]

# Milestone completed by each order status; "*" completes everything left
STATUS_MILESTONES = {
    OrderStatus.CONFIRMED: ORDER_CONFIRMED,
    OrderStatus.IN_PROGRESS: DEVELOPMENT_STARTED,
    OrderStatus.COMPLETED: "*",
}


def build_milestones(order_id: str, now: datetime, estimated_delivery: datetime) -> List[OrderMilestone]:
    """
    Seed the default milestones of a new order

    The first milestone is created completed; the others are pending.

    Args:
        order_id: Owning order
        now: Order creation time
        estimated_delivery: Due date of the final delivery

    Returns:
        Milestones in position order
    """
    milestones = []
    for position, (title, description, due_in_days, deliverables) in enumerate(MILESTONE_TEMPLATES):
        due_date = estimated_delivery if due_in_days is None else now + timedelta(days=due_in_days)
        milestone = OrderMilestone(
            order_id=order_id,
            position=position,
            title=title,
            description=description,
            due_date=due_date,
            deliverables=list(deliverables),
        )
        if position == 0:
            milestone.complete(now)
        milestones.append(milestone)
    return milestones


def apply_status_to_milestones(
    milestones: List[OrderMilestone], status: OrderStatus, now: datetime
) -> List[OrderMilestone]:
    """
    Complete the milestones implied by an order status change

    Returns:
        The milestones that changed
    """
    target = STATUS_MILESTONES.get(status)
    if target is None:
        return []

    changed = []
    for milestone in milestones:
        if milestone.status == MilestoneStatus.COMPLETED:
            continue
        if target == "*" or milestone.title == target:
            milestone.complete(now)
            changed.append(milestone)
    return changed
