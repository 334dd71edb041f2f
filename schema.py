"""Table definitions for the affiliate admin database.

``TABLES`` is ordered so that every table a foreign key points at is created
before the table holding the key. All statements are ``CREATE TABLE IF NOT
EXISTS`` and can be replayed against an already provisioned schema.
"""
import re
from dataclasses import dataclass

DEFAULT_TABLE_OPTIONS = 'ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_0900_ai_ci'
# Keyword matching folds case and accents across scripts.
KEYWORD_TABLE_OPTIONS = 'ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci'

_REFERENCES_RE = re.compile(r'REFERENCES\s+`?(\w+)`?', re.IGNORECASE)


@dataclass(frozen=True)
class TableDefinition:
    name: str
    ddl: str

    @property
    def description(self) -> str:
        return f'Create {self.name} table'

    @property
    def references(self) -> tuple[str, ...]:
        """Names of the tables this definition's foreign keys point at."""
        return tuple(dict.fromkeys(_REFERENCES_RE.findall(self.ddl)))


def find_ordering_problems(tables) -> list[str]:
    """Return a message for every foreign key that targets a not-yet-created table."""
    created: set[str] = set()
    problems = []
    for table in tables:
        for target in table.references:
            if target != table.name and target not in created:
                problems.append(f'{table.name} references {target} before it is created')
        created.add(table.name)
    return problems


ROLES = TableDefinition('roles', f"""
CREATE TABLE IF NOT EXISTS roles (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(50) NOT NULL,
  description TEXT NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_name (name)
) {DEFAULT_TABLE_OPTIONS}
""")

CATEGORIES = TableDefinition('categories', f"""
CREATE TABLE IF NOT EXISTS categories (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(255) NOT NULL,
  is_active TINYINT(1) DEFAULT 1,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_name (name),
  KEY idx_categories_is_active (is_active)
) {DEFAULT_TABLE_OPTIONS}
""")

TAGS = TableDefinition('tags', f"""
CREATE TABLE IF NOT EXISTS tags (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(255) NOT NULL,
  is_active TINYINT(1) DEFAULT 1,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_name (name),
  KEY idx_tags_is_active (is_active)
) {DEFAULT_TABLE_OPTIONS}
""")

BANNER_POSITIONS = TableDefinition('banner_positions', f"""
CREATE TABLE IF NOT EXISTS banner_positions (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(255) NOT NULL,
  width INT NOT NULL,
  height INT NOT NULL,
  is_active TINYINT(1) DEFAULT 1,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_name (name),
  KEY idx_banner_positions_is_active (is_active)
) {DEFAULT_TABLE_OPTIONS}
""")

BANNER_CAMPAIGNS = TableDefinition('banner_campaigns', f"""
CREATE TABLE IF NOT EXISTS banner_campaigns (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(255) NOT NULL,
  start_time DATETIME NULL,
  end_time DATETIME NULL,
  is_active TINYINT(1) DEFAULT 1,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_name (name),
  KEY idx_banner_campaigns_is_active (is_active)
) {DEFAULT_TABLE_OPTIONS}
""")

PERMISSIONS = TableDefinition('permissions', f"""
CREATE TABLE IF NOT EXISTS permissions (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(100) NOT NULL,
  slug VARCHAR(100) NOT NULL,
  description TEXT NULL,
  category VARCHAR(50) NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  UNIQUE KEY unique_slug (slug)
) {DEFAULT_TABLE_OPTIONS}
""")

SOCIAL_MEDIA = TableDefinition('social_media', f"""
CREATE TABLE IF NOT EXISTS social_media (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(100) NOT NULL,
  icon_url VARCHAR(255) NULL,
  url VARCHAR(500) NULL,
  is_active TINYINT(1) DEFAULT 1,
  sort_order INT DEFAULT 0,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  KEY idx_social_media_is_active (is_active)
) {DEFAULT_TABLE_OPTIONS}
""")

# Singleton row: id is always 1 and never auto-incremented.
SETTINGS = TableDefinition('settings', f"""
CREATE TABLE IF NOT EXISTS settings (
  id INT NOT NULL DEFAULT 1 PRIMARY KEY,
  site_name VARCHAR(255) NULL,
  site_description TEXT NULL,
  contact_email VARCHAR(255) NULL,
  contact_phone VARCHAR(50) NULL,
  maintenance_mode TINYINT(1) DEFAULT 0,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
) {DEFAULT_TABLE_OPTIONS}
""")

# password_hash holds "salt_hex:hash_hex"; the legacy password column stays NULL.
ADMIN_USERS = TableDefinition('admin_users', f"""
CREATE TABLE IF NOT EXISTS admin_users (
  id INT AUTO_INCREMENT PRIMARY KEY,
  username VARCHAR(50) NOT NULL,
  password VARCHAR(255) NULL,
  password_hash VARCHAR(255) NULL,
  email VARCHAR(100) NULL,
  full_name VARCHAR(100) NULL,
  status ENUM('active', 'inactive') DEFAULT 'active',
  role_id INT NULL,
  failed_login_attempts INT DEFAULT 0,
  locked_until TIMESTAMP NULL DEFAULT NULL,
  last_login_at TIMESTAMP NULL DEFAULT NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_username (username),
  KEY idx_admin_users_role_id (role_id),
  KEY idx_admin_users_status (status),
  CONSTRAINT fk_user_role FOREIGN KEY (role_id) REFERENCES roles (id) ON DELETE SET NULL
) {DEFAULT_TABLE_OPTIONS}
""")

SHOPEE_PRODUCTS = TableDefinition('shopee_products', f"""
CREATE TABLE IF NOT EXISTS shopee_products (
  id INT AUTO_INCREMENT PRIMARY KEY,
  item_id VARCHAR(50) NOT NULL,
  product_name VARCHAR(500) NULL,
  shop_id VARCHAR(50) NULL,
  shop_name VARCHAR(255) NULL,
  price DECIMAL(15,2) NULL,
  price_min DECIMAL(15,2) NULL,
  price_max DECIMAL(15,2) NULL,
  seller_commission_rate DECIMAL(5,2) NULL,
  shopee_commission_rate DECIMAL(5,2) NULL,
  default_commission_rate DECIMAL(5,2) NULL,
  image_url LONGTEXT NULL,
  product_link LONGTEXT NULL,
  offer_link LONGTEXT NULL,
  rating_star DECIMAL(3,2) NULL,
  historical_sold INT NULL,
  discount VARCHAR(50) NULL,
  start_time DATETIME NULL,
  end_time DATETIME NULL,
  is_flash_sale BOOLEAN DEFAULT FALSE,
  notes LONGTEXT NULL,
  status ENUM('active', 'inactive', 'out_of_stock') DEFAULT 'active',
  category_id INT NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_item_id (item_id),
  KEY idx_shopee_products_category (category_id),
  KEY idx_shopee_products_status (status),
  KEY idx_shopee_products_is_flash_sale (is_flash_sale),
  KEY idx_shopee_products_created_at (created_at),
  CONSTRAINT fk_product_category FOREIGN KEY (category_id) REFERENCES categories (id) ON DELETE SET NULL
) {DEFAULT_TABLE_OPTIONS}
""")

# Joins on shopee_products.item_id, not on the surrogate id.
PRODUCT_TAGS = TableDefinition('product_tags', f"""
CREATE TABLE IF NOT EXISTS product_tags (
  product_item_id VARCHAR(50) NOT NULL,
  tag_id INT NOT NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  PRIMARY KEY (product_item_id, tag_id),
  KEY idx_product_tags_item_id (product_item_id),
  KEY idx_product_tags_tag_id (tag_id),
  KEY idx_product_tags_composite (tag_id, product_item_id),
  CONSTRAINT product_tags_ibfk_1 FOREIGN KEY (product_item_id) REFERENCES shopee_products (item_id) ON DELETE CASCADE,
  CONSTRAINT product_tags_ibfk_2 FOREIGN KEY (tag_id) REFERENCES tags (id) ON DELETE CASCADE
) {DEFAULT_TABLE_OPTIONS}
""")

CATEGORY_KEYWORDS = TableDefinition('category_keywords', f"""
CREATE TABLE IF NOT EXISTS category_keywords (
  id INT AUTO_INCREMENT PRIMARY KEY,
  category_id INT NOT NULL,
  keyword VARCHAR(255) NOT NULL,
  is_priority TINYINT(1) DEFAULT 0,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  UNIQUE KEY unique_category_keyword (category_id, keyword),
  KEY idx_category_keywords_category_id (category_id),
  CONSTRAINT category_keywords_ibfk_1 FOREIGN KEY (category_id) REFERENCES categories (id) ON DELETE CASCADE
) {KEYWORD_TABLE_OPTIONS}
""")

# position_id has no delete rule (RESTRICT); campaign_id is cleared on delete.
BANNERS = TableDefinition('banners', f"""
CREATE TABLE IF NOT EXISTS banners (
  id INT AUTO_INCREMENT PRIMARY KEY,
  position_id INT NOT NULL,
  campaign_id INT NULL,
  image_url LONGTEXT NOT NULL,
  target_url TEXT NULL,
  alt_text VARCHAR(255) NULL,
  title VARCHAR(255) NULL,
  description TEXT NULL,
  sort_order INT DEFAULT 0,
  open_new_tab TINYINT(1) DEFAULT 0,
  start_time DATETIME NULL,
  end_time DATETIME NULL,
  is_active TINYINT(1) DEFAULT 1,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  KEY idx_banners_position_id (position_id),
  KEY idx_banners_campaign_id (campaign_id),
  KEY idx_banners_is_active (is_active),
  KEY idx_banners_composite (position_id, is_active),
  CONSTRAINT banners_ibfk_1 FOREIGN KEY (position_id) REFERENCES banner_positions (id),
  CONSTRAINT banners_ibfk_2 FOREIGN KEY (campaign_id) REFERENCES banner_campaigns (id) ON DELETE SET NULL
) {DEFAULT_TABLE_OPTIONS}
""")

ROLE_PERMISSIONS = TableDefinition('role_permissions', f"""
CREATE TABLE IF NOT EXISTS role_permissions (
  role_id INT NOT NULL,
  permission_id INT NOT NULL,
  PRIMARY KEY (role_id, permission_id),
  KEY idx_role_permissions_role_id (role_id),
  KEY idx_role_permissions_permission_id (permission_id),
  CONSTRAINT role_permissions_ibfk_1 FOREIGN KEY (role_id) REFERENCES roles (id) ON DELETE CASCADE,
  CONSTRAINT role_permissions_ibfk_2 FOREIGN KEY (permission_id) REFERENCES permissions (id) ON DELETE CASCADE
) {DEFAULT_TABLE_OPTIONS}
""")

ADMIN_ACTIVITY_LOGS = TableDefinition('admin_activity_logs', f"""
CREATE TABLE IF NOT EXISTS admin_activity_logs (
  id INT AUTO_INCREMENT PRIMARY KEY,
  admin_user_id INT NULL,
  action VARCHAR(255) NOT NULL,
  details TEXT NULL,
  ip_address VARCHAR(45) NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  KEY idx_admin_activity_logs_admin_user_id (admin_user_id),
  KEY idx_admin_activity_logs_created_at (created_at),
  CONSTRAINT admin_activity_logs_ibfk_1 FOREIGN KEY (admin_user_id) REFERENCES admin_users (id) ON DELETE SET NULL
) {DEFAULT_TABLE_OPTIONS}
""")

TABLES = (
    # no foreign keys
    ROLES,
    CATEGORIES,
    TAGS,
    BANNER_POSITIONS,
    BANNER_CAMPAIGNS,
    PERMISSIONS,
    SOCIAL_MEDIA,
    SETTINGS,
    # dependents
    ADMIN_USERS,
    SHOPEE_PRODUCTS,
    PRODUCT_TAGS,
    CATEGORY_KEYWORDS,
    BANNERS,
    ROLE_PERMISSIONS,
    ADMIN_ACTIVITY_LOGS,
)

TABLE_NAMES = tuple(table.name for table in TABLES)
