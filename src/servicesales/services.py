"""Service functions for sold services."""
import logging
from decimal import Decimal

from django.db import transaction

from servicesales.models import ServiceSale

logger = logging.getLogger("formapro")


@transaction.atomic
def sync_daily_stat_service_sales(stat):
    """Rebuild the service sales booked by an approved daily stat.

    Lines with a zero quantity are not booked.  A stat that is not
    approved owns no service sale.

    Parameters
    ----------
    stat : dailystats.models.DailyStat

    Returns
    -------
    list[ServiceSale]
    """
    remove_daily_stat_service_sales(stat)
    if not stat.is_approved:
        return []

    sales = []
    for line in stat.sold_services or []:
        quantity = int(line.get("quantity") or 0)
        if quantity <= 0:
            continue
        price = Decimal(str(line.get("price") or 0))
        sales.append(ServiceSale(
            academy_id=stat.employee.academy_id,
            daily_stat=stat,
            employee_id=stat.employee_id,
            name=line["name"],
            price=price,
            quantity=quantity,
            total_amount=(price * quantity).quantize(Decimal("0.01")),
            sale_date=stat.date,
            notes=f"Statistique journaliere #{stat.pk}",
        ))
    if sales:
        ServiceSale.objects.bulk_create(sales)
        logger.info("%d service sale(s) booked for daily stat %s", len(sales), stat.pk)
    return sales


def remove_daily_stat_service_sales(stat) -> int:
    """Delete the service sales booked by *stat*; other sales are untouched."""
    deleted, _ = ServiceSale.objects.filter(daily_stat=stat).delete()
    if deleted:
        logger.info("Service sales of daily stat %s removed", stat.pk)
    return deleted
