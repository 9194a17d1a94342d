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
            name='QuestionContext',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('level', models.CharField(choices=[('SYSTEM', 'System'), ('COURSE_CATEGORY', 'Category'), ('COURSE', 'Course'), ('MODULE', 'Quiz')], db_index=True, max_length=20)),
                ('name', models.CharField(max_length=255)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='question_bank.questioncontext')),
            ],
            options={
                'db_table': 'question_contexts',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='QuestionCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('info', models.TextField(blank=True)),
                ('id_number', models.CharField(blank=True, max_length=100, null=True)),
                ('sort_order', models.PositiveIntegerField(default=999)),
                ('context', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='categories', to='question_bank.questioncontext')),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='question_bank.questioncategory')),
            ],
            options={
                'db_table': 'question_categories',
                'ordering': ['context', 'sort_order', 'name'],
                'verbose_name_plural': 'question categories',
            },
        ),
        migrations.CreateModel(
            name='Question',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('question_text', models.TextField(blank=True)),
                ('qtype', models.CharField(choices=[('shortanswer', 'Short answer'), ('multichoice', 'Multiple choice'), ('truefalse', 'True/False'), ('essay', 'Essay'), ('random', 'Random')], default='shortanswer', max_length=20)),
                ('hidden', models.BooleanField(default=False)),
                ('include_subcategories', models.BooleanField(default=False)),
                ('created_by_id', models.BigIntegerField(blank=True, null=True)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='question_bank.questioncategory')),
            ],
            options={
                'db_table': 'questions',
                'ordering': ['category', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Quiz',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('context', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quizzes', to='question_bank.questioncontext')),
            ],
            options={
                'db_table': 'quizzes',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='QuizSlot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('slot', models.PositiveIntegerField()),
                ('max_mark', models.DecimalField(decimal_places=7, default=1, max_digits=12)),
                ('question', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='slots', to='question_bank.question')),
                ('quiz', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='slots', to='question_bank.quiz')),
            ],
            options={
                'db_table': 'quiz_slots',
                'ordering': ['quiz', 'slot'],
            },
        ),
        migrations.CreateModel(
            name='RoleAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('role', models.CharField(choices=[('MANAGER', 'Manager'), ('EDITING_TEACHER', 'Editing teacher'), ('TEACHER', 'Non-editing teacher'), ('STUDENT', 'Student')], max_length=20)),
                ('context', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_assignments', to='question_bank.questioncontext')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_assignments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'role_assignments',
            },
        ),
        migrations.AddConstraint(
            model_name='questioncategory',
            constraint=models.UniqueConstraint(condition=models.Q(('parent__isnull', True)), fields=('context',), name='uniq_top_category_per_context'),
        ),
        migrations.AddConstraint(
            model_name='questioncategory',
            constraint=models.UniqueConstraint(fields=('context', 'id_number'), name='uniq_category_id_number_per_context'),
        ),
        migrations.AddConstraint(
            model_name='quizslot',
            constraint=models.UniqueConstraint(fields=('quiz', 'slot'), name='uniq_quiz_slot'),
        ),
        migrations.AddConstraint(
            model_name='roleassignment',
            constraint=models.UniqueConstraint(fields=('user', 'context', 'role'), name='uniq_role_assignment'),
        ),
    ]
