from functools import lru_cache
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.payment_gateway import create_payment_gateway
from src.adapter.services.event_publisher import create_event_publisher
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.pdf_service import ReportLabPdfService
from src.app.services.event_publisher import EventPublisher
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.pdf_service import PdfService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


# The simulated gateway keeps payments in memory, so one instance per process
@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return create_payment_gateway(
        ApplicationConfig.PAYMENT_GATEWAY,
        base_url=ApplicationConfig.PAYMENT_API_URL,
        api_key=ApplicationConfig.PAYMENT_API_KEY,
        timeout=ApplicationConfig.PAYMENT_API_TIMEOUT,
    )


@lru_cache
def get_event_publisher() -> EventPublisher:
    return create_event_publisher(ApplicationConfig.EVENT_WEBHOOK_URL)


@lru_cache
def get_notification_service() -> NotificationService:
    return create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK_URL)


def get_pdf_service() -> PdfService:
    return ReportLabPdfService()
