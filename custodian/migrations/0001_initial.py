"""
Initial migration for Custodian models.
"""

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Custodian models: Item, Transaction, LowStockAlert."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('location', models.CharField(blank=True, default='', max_length=200, verbose_name='Localização')),
                ('quantity', models.IntegerField(default=0, help_text='Atualizado somente por movimentações', verbose_name='Quantidade')),
                ('min_quantity', models.IntegerField(default=0, help_text='Alerta dispara quando quantidade <= este valor', verbose_name='Quantidade Mínima')),
                ('max_quantity', models.IntegerField(blank=True, null=True, verbose_name='Quantidade Máxima')),
                ('status', models.CharField(choices=[('AVAILABLE', 'Disponível'), ('IN_USE', 'Em uso'), ('MAINTENANCE', 'Em manutenção'), ('LOST', 'Extraviado'), ('EXPIRED', 'Vencido'), ('DISCONTINUED', 'Descontinuado')], db_index=True, default='AVAILABLE', max_length=20, verbose_name='Status')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Itens',
                'ordering': ['name'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='custodian_item_quantity_non_negative'),
                    models.CheckConstraint(condition=models.Q(('min_quantity__gte', 0)), name='custodian_item_min_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('transaction_type', models.CharField(choices=[('CHECKOUT', 'Retirada'), ('CHECKIN', 'Entrada')], max_length=20, verbose_name='Tipo')),
                ('quantity', models.IntegerField(verbose_name='Quantidade')),
                ('status', models.CharField(choices=[('ACTIVE', 'Ativa'), ('COMPLETED', 'Concluída')], db_index=True, default='ACTIVE', max_length=20, verbose_name='Status')),
                ('due_date', models.DateField(blank=True, null=True, verbose_name='Devolver até')),
                ('returned_at', models.DateTimeField(blank=True, null=True, verbose_name='Devolvido em')),
                ('location_used', models.CharField(blank=True, default='', max_length=200, verbose_name='Local de uso')),
                ('condition_on_return', models.CharField(blank=True, default='', max_length=200, verbose_name='Condição na devolução')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Observações')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='custodian.item', verbose_name='Item')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='custody_transactions', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
            ],
            options={
                'verbose_name': 'Transação',
                'verbose_name_plural': 'Transações',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['item', 'status'], name='custodian_txn_item_status_idx'),
                    models.Index(fields=['user', 'status'], name='custodian_txn_user_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='custodian_transaction_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LowStockAlert',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('current_quantity', models.IntegerField(verbose_name='Quantidade atual')),
                ('min_quantity', models.IntegerField(verbose_name='Quantidade Mínima')),
                ('alert_level', models.CharField(choices=[('LOW', 'Baixo'), ('CRITICAL', 'Crítico'), ('OUT_OF_STOCK', 'Esgotado')], max_length=20, verbose_name='Nível')),
                ('status', models.CharField(choices=[('ACTIVE', 'Ativo'), ('ACKNOWLEDGED', 'Reconhecido'), ('RESOLVED', 'Resolvido')], db_index=True, default='ACTIVE', max_length=20, verbose_name='Status')),
                ('acknowledged_at', models.DateTimeField(blank=True, null=True, verbose_name='Reconhecido em')),
                ('resolved_at', models.DateTimeField(blank=True, null=True, verbose_name='Resolvido em')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
                ('acknowledged_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Reconhecido por')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='alerts', to='custodian.item', verbose_name='Item')),
            ],
            options={
                'verbose_name': 'Alerta de Estoque Baixo',
                'verbose_name_plural': 'Alertas de Estoque Baixo',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['item', 'status'], name='custodian_alrt_item_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['ACTIVE', 'ACKNOWLEDGED'])), fields=('item',), name='unique_open_alert_per_item'),
                ],
            },
        ),
    ]
