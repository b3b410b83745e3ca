"""
Initial migration for Stockledger models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


STATE_CHOICES = [
    ('normal', 'Normal'),
    ('reserved', 'Reserved'),
    ('in_inspection', 'In inspection'),
    ('defective', 'Defective'),
]

KIND_CHOICES = [
    ('sale', 'Sale'),
    ('customer_return', 'Customer return'),
    ('ship_request_created', 'Shipping request created'),
    ('reserve', 'Reserve'),
    ('ship_confirmed', 'Shipment confirmed'),
    ('goods_received', 'Goods received'),
    ('shelved', 'Shelved'),
    ('store_return_sent', 'Store return sent'),
    ('return_received', 'Return received'),
    ('return_inspected', 'Return inspected'),
]


class Migration(migrations.Migration):
    """Create Stockledger models."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=64, unique=True, verbose_name='SKU')),
                ('model_name', models.CharField(max_length=100, verbose_name='Model')),
                ('color', models.CharField(max_length=50, verbose_name='Color')),
                ('size', models.CharField(max_length=20, verbose_name='Size')),
                ('category', models.CharField(blank=True, default='', max_length=100, verbose_name='Category')),
                ('retail_price', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='Retail price')),
                ('cost_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Cost price')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['sku'],
            },
        ),
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.SlugField(help_text='Unique identifier (e.g. SHELF_A, STORE_1)', unique=True, verbose_name='Code')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('kind', models.CharField(choices=[('warehouse', 'Warehouse shelf'), ('store', 'Store')], max_length=20, verbose_name='Kind')),
                ('display_order', models.IntegerField(default=0, verbose_name='Display order')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
            ],
            options={
                'verbose_name': 'Location',
                'verbose_name_plural': 'Locations',
                'ordering': ['display_order', 'code'],
            },
        ),
        migrations.CreateModel(
            name='Balance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('state', models.CharField(choices=STATE_CHOICES, max_length=20, verbose_name='State')),
                ('quantity', models.PositiveIntegerField(default=0, verbose_name='Quantity')),
                ('last_updated', models.DateTimeField(default=django.utils.timezone.now)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='balances', to='stockledger.product', verbose_name='Product')),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='balances', to='stockledger.location', verbose_name='Location')),
            ],
            options={
                'verbose_name': 'Balance',
                'verbose_name_plural': 'Balances',
                'ordering': ['product', 'location', 'state'],
                'indexes': [
                    models.Index(fields=['location', 'state'], name='stockledger_bal_loc_state_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'location', 'state'), name='unique_balance_coordinate'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='balance_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoryEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=KIND_CHOICES, db_index=True, max_length=32, verbose_name='Operation')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('from_state', models.CharField(blank=True, choices=STATE_CHOICES, max_length=20, null=True, verbose_name='From state')),
                ('to_state', models.CharField(blank=True, choices=STATE_CHOICES, max_length=20, null=True, verbose_name='To state')),
                ('amount', models.DecimalField(blank=True, decimal_places=2, help_text='Monetary amount, e.g. the sale total', max_digits=10, null=True, verbose_name='Amount')),
                ('reference', models.CharField(blank=True, default='', help_text='Related record, e.g. "shipping:12" or "inbound:3"', max_length=64, verbose_name='Reference')),
                ('memo', models.TextField(blank=True, default='', verbose_name='Memo')),
                ('actor', models.CharField(max_length=150, verbose_name='Performed by')),
                ('performed_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Performed at')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='history', to='stockledger.product', verbose_name='Product')),
                ('from_location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockledger.location', verbose_name='From location')),
                ('to_location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockledger.location', verbose_name='To location')),
            ],
            options={
                'verbose_name': 'History entry',
                'verbose_name_plural': 'History',
                'ordering': ['-performed_at', '-id'],
                'indexes': [
                    models.Index(fields=['product', 'performed_at'], name='stockledger_hist_prod_at_idx'),
                    models.Index(fields=['kind', 'performed_at'], name='stockledger_hist_kind_at_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='history_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShippingInstruction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('requested_date', models.DateField(blank=True, null=True, verbose_name='Requested date')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('is_reserved', models.BooleanField(default=False, help_text='Source stock already moved to RESERVED', verbose_name='Reserved')),
                ('memo', models.TextField(blank=True, default='')),
                ('created_by', models.CharField(max_length=150, verbose_name='Created by')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('completed_by', models.CharField(blank=True, default='', max_length=150)),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Completed at')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shipping_instructions', to='stockledger.product', verbose_name='Product')),
                ('from_location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outgoing_shipments', to='stockledger.location', verbose_name='From')),
                ('to_location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_shipments', to='stockledger.location', verbose_name='To')),
            ],
            options={
                'verbose_name': 'Shipping instruction',
                'verbose_name_plural': 'Shipping instructions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['product', 'to_location', 'status'], name='stockledger_ship_pending_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='shipping_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InboundPlan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('supplier_name', models.CharField(max_length=150, verbose_name='Supplier')),
                ('planned_quantity', models.PositiveIntegerField(verbose_name='Planned')),
                ('received_quantity', models.PositiveIntegerField(default=0, verbose_name='Received')),
                ('due_date', models.DateField(db_index=True, verbose_name='Due date')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('canceled', 'Canceled')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('memo', models.TextField(blank=True, default='')),
                ('created_by', models.CharField(max_length=150, verbose_name='Created by')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('completed_at', models.DateTimeField(blank=True, help_text='When the plan was completed or canceled', null=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inbound_plans', to='stockledger.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Inbound plan',
                'verbose_name_plural': 'Inbound plans',
                'ordering': ['due_date', 'id'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('planned_quantity__gt', 0)), name='inbound_planned_positive'),
                    models.CheckConstraint(condition=models.Q(('received_quantity__lte', models.F('planned_quantity'))), name='inbound_received_within_planned'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ReplenishmentCriteria',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('min_stock', models.PositiveIntegerField(default=0, help_text='Alert when NORMAL stock is below this value', verbose_name='Minimum stock')),
                ('target_stock', models.PositiveIntegerField(default=0, verbose_name='Target stock')),
                ('standard_quantity', models.PositiveIntegerField(default=0, help_text='Default order size (0 = top up to target)', verbose_name='Standard replenishment')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='replenishment_criteria', to='stockledger.product', verbose_name='Product')),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='replenishment_criteria', to='stockledger.location', verbose_name='Location')),
            ],
            options={
                'verbose_name': 'Replenishment criteria',
                'verbose_name_plural': 'Replenishment criteria',
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'location'), name='unique_criteria_per_product_location'),
                    models.CheckConstraint(condition=models.Q(('min_stock__lte', models.F('target_stock'))), name='criteria_min_not_above_target'),
                ],
            },
        ),
    ]
