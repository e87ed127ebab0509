from yoyo import step

__depends__ = {}

steps = [
    # Create brands table
    step(
        """
        CREATE TABLE brands (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL UNIQUE,
            slug VARCHAR(255) NOT NULL UNIQUE,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        );
        """,
        "DROP TABLE IF EXISTS brands;"
    ),

    # Create categories table (two levels: level 0 roots, level 1 children)
    step(
        """
        CREATE TABLE categories (
            id SERIAL PRIMARY KEY,
            external_id VARCHAR(100) NOT NULL UNIQUE,
            name VARCHAR(255) NOT NULL,
            slug VARCHAR(255) NOT NULL,
            parent_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
            level SMALLINT NOT NULL DEFAULT 0,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX idx_categories_parent_id ON categories(parent_id);
        """,
        """
        DROP INDEX IF EXISTS idx_categories_parent_id;
        DROP TABLE IF EXISTS categories;
        """
    ),

    # Create products table
    step(
        """
        CREATE TABLE products (
            id SERIAL PRIMARY KEY,
            external_id VARCHAR(100) NOT NULL UNIQUE,
            name VARCHAR(500) NOT NULL,
            slug VARCHAR(255) NOT NULL,
            description TEXT,
            price DECIMAL(12, 2) NOT NULL,
            old_price DECIMAL(12, 2),
            currency VARCHAR(3) NOT NULL DEFAULT 'UAH',
            in_stock BOOLEAN NOT NULL DEFAULT false,
            brand_id INTEGER REFERENCES brands(id) ON DELETE SET NULL,
            category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
            images TEXT[] DEFAULT '{}',
            attributes JSONB DEFAULT '{}'::jsonb,
            vendor_code VARCHAR(100),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,

            CONSTRAINT valid_price CHECK (price >= 0)
        );
        CREATE INDEX idx_products_brand_id ON products(brand_id);
        CREATE INDEX idx_products_category_id ON products(category_id);
        CREATE INDEX idx_products_attributes ON products USING GIN (attributes);
        """,
        """
        DROP INDEX IF EXISTS idx_products_attributes;
        DROP INDEX IF EXISTS idx_products_category_id;
        DROP INDEX IF EXISTS idx_products_brand_id;
        DROP TABLE IF EXISTS products;
        """
    ),

    # Create timestamp update function and triggers
    step(
        """
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ language 'plpgsql';

        CREATE TRIGGER update_brands_updated_at
            BEFORE UPDATE ON brands
            FOR EACH ROW
            EXECUTE FUNCTION update_updated_at_column();

        CREATE TRIGGER update_categories_updated_at
            BEFORE UPDATE ON categories
            FOR EACH ROW
            EXECUTE FUNCTION update_updated_at_column();

        CREATE TRIGGER update_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW
            EXECUTE FUNCTION update_updated_at_column();
        """,
        """
        DROP TRIGGER IF EXISTS update_products_updated_at ON products;
        DROP TRIGGER IF EXISTS update_categories_updated_at ON categories;
        DROP TRIGGER IF EXISTS update_brands_updated_at ON brands;
        DROP FUNCTION IF EXISTS update_updated_at_column();
        """
    )
]
