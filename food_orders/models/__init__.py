from food_orders.models.food import Category, Food
from food_orders.models.additional_option import AdditionalOption
from food_orders.models.payment_method import PaymentMethod
from food_orders.models.order import Order
from food_orders.models.payment_reconciliation import PaymentReconciliationLog
