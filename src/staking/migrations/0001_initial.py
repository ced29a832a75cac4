import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StakingPlan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=128)),
                ('apy', models.DecimalField(decimal_places=4, help_text='Annual percentage yield, in percent (8 = 8%)', max_digits=7)),
                ('lock_period_days', models.PositiveIntegerField(default=0, help_text='Days a position is locked for. 0 means flexible')),
                ('minimum_amount', models.DecimalField(decimal_places=10, max_digits=19)),
                ('maximum_amount', models.DecimalField(blank=True, decimal_places=10, help_text='Leave empty for no upper bound', max_digits=19, null=True)),
                ('supported_coins', models.JSONField(default=list, help_text='Asset ids that can be staked under this plan')),
                ('is_active', models.BooleanField(default=True)),
            ],
        ),
        migrations.CreateModel(
            name='StakingPosition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('coin_id', models.CharField(max_length=64)),
                ('amount', models.DecimalField(decimal_places=10, max_digits=19)),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField(blank=True, help_text='End of the lock period. Empty for flexible plans', null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('withdrawn', 'Withdrawn'), ('cancelled', 'Cancelled')], default='active', max_length=16)),
                ('total_rewards', models.DecimalField(decimal_places=10, default=0, max_digits=19)),
                ('last_reward_date', models.DateTimeField(blank=True, null=True)),
                ('plan', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.DO_NOTHING, related_name='positions', to='staking.stakingplan')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='staking_positions', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='StakingReward',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('amount', models.DecimalField(decimal_places=10, max_digits=19)),
                ('reward_date', models.DateTimeField()),
                ('apy_rate', models.DecimalField(decimal_places=4, max_digits=7)),
                ('position', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rewards', to='staking.stakingposition')),
            ],
        ),
        migrations.AddConstraint(
            model_name='stakingplan',
            constraint=models.CheckConstraint(condition=models.Q(('apy__gte', 0)), name='staking_plan_apy_non_negative'),
        ),
        migrations.AddConstraint(
            model_name='stakingplan',
            constraint=models.CheckConstraint(condition=models.Q(('minimum_amount__gte', 0)), name='staking_plan_minimum_non_negative'),
        ),
        migrations.AddConstraint(
            model_name='stakingplan',
            constraint=models.CheckConstraint(condition=models.Q(('maximum_amount__isnull', True), ('maximum_amount__gte', models.F('minimum_amount')), _connector='OR'), name='staking_plan_maximum_gte_minimum'),
        ),
        migrations.AddIndex(
            model_name='stakingplan',
            index=models.Index(fields=['is_active'], name='staking_plan_active_idx'),
        ),
        migrations.AddConstraint(
            model_name='stakingposition',
            constraint=models.CheckConstraint(condition=models.Q(('amount__gt', 0)), name='staking_position_amount_positive'),
        ),
        migrations.AddConstraint(
            model_name='stakingposition',
            constraint=models.CheckConstraint(condition=models.Q(('total_rewards__gte', 0)), name='staking_position_rewards_non_negative'),
        ),
        migrations.AddIndex(
            model_name='stakingposition',
            index=models.Index(fields=['status'], name='staking_pos_status_idx'),
        ),
        migrations.AddIndex(
            model_name='stakingposition',
            index=models.Index(fields=['user', 'status'], name='staking_pos_user_status_idx'),
        ),
        migrations.AddIndex(
            model_name='stakingreward',
            index=models.Index(fields=['position', 'reward_date'], name='staking_rew_pos_date_idx'),
        ),
    ]
