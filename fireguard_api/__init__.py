"""FireGuard storefront backend: products, enquiries, reports and accounts over Google Sheets."""
