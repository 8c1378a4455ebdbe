from flockwise.models.batch import Batch
from flockwise.models.feed import FeedConsumption, FeedInventory, FeedPurchase
from flockwise.models.finance import DailyBankingRecord, ExpenseTransaction, IncomeTransaction
from flockwise.models.flock import Flock
from flockwise.models.health import DiseaseOutbreak, HealthCheck, VaccinationRecord
from flockwise.models.inventory_items import InventoryItem
from flockwise.models.production import BirthRecord, EggCollection, MortalityRecord, WeightRecord
from flockwise.models.purchase_orders import PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus
from flockwise.models.stock_movement import MovementType, StockMovement
from flockwise.models.supplier import Supplier

__all__ = ['Batch', 'BirthRecord', 'DailyBankingRecord', 'DiseaseOutbreak', 'EggCollection', 'ExpenseTransaction', 'FeedConsumption', 'FeedInventory', 'FeedPurchase', 'Flock', 'HealthCheck', 'IncomeTransaction', 'InventoryItem', 'MortalityRecord', 'MovementType', 'PurchaseOrder', 'PurchaseOrderItem', 'PurchaseOrderStatus', 'StockMovement', 'Supplier', 'VaccinationRecord', 'WeightRecord']
