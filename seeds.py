"""Reference rows written on every bootstrap run.

Each batch becomes one multi-row ``INSERT ... ON DUPLICATE KEY UPDATE``
statement: rows whose primary key already exists get every column overwritten
in place, the rest are inserted. The update never deletes, so rows outside
these batches, and rows pointing at seeded keys, are never touched.
"""
from dataclasses import dataclass

from pymysql.converters import escape_item


@dataclass(frozen=True)
class SeedBatch:
    table: str
    description: str
    columns: tuple
    rows: tuple
    key: tuple = ('id',)

    def update_columns(self) -> tuple:
        # A pure join table has nothing to update; assigning the key is a no-op.
        return tuple(column for column in self.columns if column not in self.key) or self.key

    def statement(self) -> str:
        placeholders = '(' + ', '.join(['%s'] * len(self.columns)) + ')'
        values = ',\n  '.join([placeholders] * len(self.rows))
        assignments = ',\n  '.join(f'{column} = new.{column}' for column in self.update_columns())
        return (
            f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES\n  {values}\n"
            f"AS new ON DUPLICATE KEY UPDATE\n  {assignments}"
        )

    def params(self) -> tuple:
        return tuple(value for row in self.rows for value in row)

    def as_sql(self) -> str:
        """Render the statement with literal values, for SQL file export."""
        literals = tuple(escape_item(value, 'utf8mb4') for value in self.params())
        return self.statement() % literals

    def primary_keys(self) -> list[tuple]:
        positions = [self.columns.index(column) for column in self.key]
        return [tuple(row[i] for i in positions) for row in self.rows]


ROLES = SeedBatch(
    'roles',
    'Insert roles',
    ('id', 'name', 'description', 'created_at', 'updated_at'),
    (
        (1, 'Super Admin', 'Full access to all features', '2025-11-23 10:07:40', '2025-11-23 10:07:40'),
        (2, 'Admin', 'Can manage content and users', '2025-11-23 10:07:40', '2025-11-23 10:07:40'),
        (3, 'Editor', 'Can manage content', '2025-11-23 10:07:40', '2025-11-23 10:07:40'),
        (4, 'Viewer', 'Read-only access', '2025-11-23 10:07:40', '2025-11-23 10:07:40'),
    ),
)

# Slugs are matched by callers, ids are not.
PERMISSIONS = SeedBatch(
    'permissions',
    'Insert permissions',
    ('id', 'name', 'slug', 'description', 'category', 'created_at'),
    (
        (1, 'View Products', 'view_products', None, 'Products', '2025-11-23 10:07:40'),
        (2, 'Create Products', 'create_products', None, 'Products', '2025-11-23 10:07:40'),
        (3, 'Edit Products', 'edit_products', None, 'Products', '2025-11-23 10:07:40'),
        (4, 'Delete Products', 'delete_products', None, 'Products', '2025-11-23 10:07:40'),
        (5, 'View Categories', 'view_categories', None, 'Categories', '2025-11-23 10:07:40'),
        (6, 'Create Categories', 'create_categories', None, 'Categories', '2025-11-23 10:07:40'),
        (7, 'Edit Categories', 'edit_categories', None, 'Categories', '2025-11-23 10:07:40'),
        (8, 'Delete Categories', 'delete_categories', None, 'Categories', '2025-11-23 10:07:40'),
        (9, 'View Tags', 'view_tags', None, 'Tags', '2025-11-23 10:07:40'),
        (10, 'Create Tags', 'create_tags', None, 'Tags', '2025-11-23 10:07:40'),
        (11, 'Edit Tags', 'edit_tags', None, 'Tags', '2025-11-23 10:07:40'),
        (12, 'Delete Tags', 'delete_tags', None, 'Tags', '2025-11-23 10:07:40'),
        (13, 'View Banners', 'view_banners', None, 'Banners', '2025-11-23 10:07:40'),
        (14, 'Create Banners', 'create_banners', None, 'Banners', '2025-11-23 10:07:40'),
        (15, 'Edit Banners', 'edit_banners', None, 'Banners', '2025-11-23 10:07:40'),
        (16, 'Delete Banners', 'delete_banners', None, 'Banners', '2025-11-23 10:07:40'),
        (17, 'View Settings', 'view_settings', None, 'Settings', '2025-11-23 10:07:40'),
        (18, 'Create Settings', 'create_settings', None, 'Settings', '2025-11-23 10:07:40'),
        (19, 'Edit Settings', 'edit_settings', None, 'Settings', '2025-11-23 10:07:40'),
        (20, 'Delete Settings', 'delete_settings', None, 'Settings', '2025-11-23 10:07:40'),
        (21, 'View Admin Users', 'view_admin_users', None, 'Admin Users', '2025-11-23 10:07:40'),
        (22, 'Create Admin Users', 'create_admin_users', None, 'Admin Users', '2025-11-23 10:07:40'),
        (23, 'Edit Admin Users', 'edit_admin_users', None, 'Admin Users', '2025-11-23 10:07:40'),
        (24, 'Delete Admin Users', 'delete_admin_users', None, 'Admin Users', '2025-11-23 10:07:40'),
        (25, 'View Roles', 'view_roles', None, 'Roles', '2025-11-23 10:07:40'),
        (26, 'Create Roles', 'create_roles', None, 'Roles', '2025-11-23 10:07:40'),
        (27, 'Edit Roles', 'edit_roles', None, 'Roles', '2025-11-23 10:07:40'),
        (28, 'Delete Roles', 'delete_roles', None, 'Roles', '2025-11-23 10:07:40'),
    ),
)

# (role_id, permission_id); one line per permission.
ROLE_PERMISSIONS = SeedBatch(
    'role_permissions',
    'Insert role permissions',
    ('role_id', 'permission_id'),
    (
        (1, 1), (2, 1), (3, 1), (4, 1),
        (1, 2), (2, 2), (3, 2),
        (1, 3), (2, 3),
        (1, 4), (2, 4),
        (1, 5), (2, 5), (3, 5),
        (1, 6), (2, 6), (3, 6),
        (1, 7), (2, 7),
        (1, 8), (2, 8),
        (1, 9), (2, 9), (3, 9),
        (1, 10), (2, 10), (3, 10),
        (1, 11), (2, 11),
        (1, 12), (2, 12),
        (1, 13), (2, 13), (3, 13), (4, 13),
        (1, 14), (2, 14), (3, 14),
        (1, 15), (2, 15),
        (1, 16), (2, 16),
        (1, 17), (1, 18), (1, 19), (1, 20),
        (1, 21), (2, 21),
        (1, 22), (2, 22),
        (1, 23), (2, 23),
        (1, 24), (2, 24),
        (1, 25), (2, 25),
        (1, 26), (2, 26),
        (1, 27), (2, 27),
        (1, 28), (2, 28),
    ),
    key=('role_id', 'permission_id'),
)

ADMIN_USERS = SeedBatch(
    'admin_users',
    'Insert admin users',
    (
        'id', 'username', 'password', 'password_hash', 'email', 'full_name', 'status', 'role_id',
        'failed_login_attempts', 'locked_until', 'last_login_at', 'created_at', 'updated_at',
    ),
    (
        (
            1, 'admin', None,
            'def1d7374d36868512439415e593eb2b:6877475d3a2d2c6a013f5d242c4a99a838e703dd81becf9ae5dd7acd237e6c25'
            'fafcaa31979ba23133620f97c07050dddefec669b403c564727c10ff64069063',
            'admin@example.com', 'Admin User', 'active', 1, 0, None, None,
            '2025-11-22 15:04:49', '2025-11-30 12:41:19',
        ),
        (
            4, 'Admin2', None,
            'd36782bb62e459062692c3a04db4c2c8:92325927c3892cdd1b7b1123cd0964310c5a98b14290180458b12cc36fe986e2'
            '3a66b3934a1109f4ce474a8fbfd444709ce904719d50a2e4d21e18419c6b935d',
            'admin', '', 'active', 2, 0, None, None,
            '2025-11-23 12:44:47', '2025-11-30 13:23:02',
        ),
        (
            6, 'editor', None,
            '298c0e0eab5e4128dec28557ab8768a0:83b5abf8588103b44bbfca484ab2e8a497105e5d462903a871d0245a159d1ae4'
            '81f1db373455b6d7f2906a323cdc62573a19b319789daee845f308e4d9878258',
            '', '', 'active', 3, 0, None, None,
            '2025-11-23 12:51:51', '2025-11-23 12:51:51',
        ),
    ),
)

CATEGORIES = SeedBatch(
    'categories',
    'Insert categories',
    ('id', 'name', 'created_at', 'updated_at', 'is_active'),
    (
        (7, 'Health & Beauty', '2025-11-23 04:16:53', '2025-11-23 04:16:53', 1),
        (8, 'Electronics', '2025-11-23 04:18:19', '2025-11-30 16:22:32', 1),
        (9, 'Fashion & Accessories', '2025-11-23 04:18:42', '2025-11-23 04:18:42', 1),
        (10, 'Home & Living', '2025-11-23 04:18:51', '2025-11-23 04:18:51', 1),
        (11, 'Family', '2025-11-23 04:19:48', '2025-11-23 04:19:48', 1),
        (12, 'Toys & Pets', '2025-11-23 04:19:56', '2025-11-23 04:19:56', 1),
        (14, 'Food & Beverage', '2025-11-29 11:01:04', '2025-12-07 14:55:51', 1),
    ),
)

TAGS = SeedBatch(
    'tags',
    'Insert tags',
    ('id', 'name', 'is_active', 'created_at', 'updated_at'),
    (
        (3, 'Skincare', 1, '2025-11-23 04:54:18', '2025-11-23 04:54:18'),
        (4, 'Makeup', 1, '2025-11-23 04:54:58', '2025-11-23 04:54:58'),
    ),
)

BANNER_POSITIONS = SeedBatch(
    'banner_positions',
    'Insert banner positions',
    ('id', 'name', 'width', 'height', 'is_active', 'created_at', 'updated_at'),
    (
        (1, 'Homepage Top Banner', 1920, 600, 1, '2025-11-23 05:46:27', '2025-11-23 05:46:27'),
        (4, 'Banner Ads', 800, 800, 1, '2025-11-23 05:57:49', '2025-11-23 05:57:49'),
        (5, 'Flash Sale Banner', 1200, 240, 1, '2025-11-29 06:36:47', '2025-11-29 06:36:47'),
        (6, 'Banner Popup', 500, 500, 1, '2025-11-29 11:17:10', '2025-11-29 11:17:10'),
    ),
)

BANNER_CAMPAIGNS = SeedBatch(
    'banner_campaigns',
    'Insert banner campaigns',
    ('id', 'name', 'start_time', 'end_time', 'is_active', 'created_at', 'updated_at'),
    (
        (3, 'Black Friday', '2025-11-22 09:50:00', '2025-12-01 23:59:00', 0, '2025-11-23 05:50:03', '2025-12-07 02:54:20'),
    ),
)

_DR_JILL_SERUM_URL = (
    'https://shopee.co.th/-%E0%B8%AA%E0%B9%88%E0%B8%87%E0%B8%9F%E0%B8%A3%E0%B8%B5-Dr.JiLL-Advanced-Serum-'
    '%E0%B8%94%E0%B8%A3.%E0%B8%88%E0%B8%B4%E0%B8%A5-%E0%B8%AA%E0%B8%B9%E0%B8%95%E0%B8%A3%E0%B9%83%E0%B8%AB'
    '%E0%B8%A1%E0%B9%88-2-%E0%B8%82%E0%B8%A7%E0%B8%94-%E0%B8%82%E0%B8%99%E0%B8%B2%E0%B8%94-30-ml-%E0%B9%80'
    '%E0%B8%8B%E0%B8%A3%E0%B8%B1%E0%B9%88%E0%B8%A1%E0%B8%84%E0%B8%B8%E0%B8%93%E0%B8%AB%E0%B8%A1%E0%B8%AD'
    '-i.504643137.8987241599'
)

BANNERS = SeedBatch(
    'banners',
    'Insert banners',
    (
        'id', 'position_id', 'campaign_id', 'image_url', 'target_url', 'alt_text', 'title', 'description',
        'sort_order', 'open_new_tab', 'start_time', 'end_time', 'is_active', 'created_at', 'updated_at',
    ),
    (
        (
            6, 5, None, '/api/uploads/banners/banner-1765093162698-1765093162707-660513297.jpg',
            'https://s.shopee.co.th/9fDRryHKav', '', '', '', 0, 1, None, None, 1,
            '2025-11-29 07:39:22', '2025-12-07 07:39:25',
        ),
        (
            7, 6, None, '/api/uploads/banners/banner-1765079322112-1765079322117-886687148.jpg',
            _DR_JILL_SERUM_URL, '', '', '', 0, 1, None, None, 1,
            '2025-11-29 11:18:21', '2025-12-07 03:48:45',
        ),
        (
            8, 6, None, '/api/uploads/banners/banner-1765079335640-1765079335645-735386248.jpg',
            'https://shopee.co.th/', '', '', '', 1, 1, None, None, 1,
            '2025-11-29 11:41:46', '2025-12-07 03:48:59',
        ),
    ),
)

SEEDS = (
    ROLES,
    PERMISSIONS,
    ROLE_PERMISSIONS,
    ADMIN_USERS,
    CATEGORIES,
    TAGS,
    BANNER_POSITIONS,
    BANNER_CAMPAIGNS,
    BANNERS,
)

EXPECTED_COUNTS = {batch.table: len(batch.rows) for batch in SEEDS}
