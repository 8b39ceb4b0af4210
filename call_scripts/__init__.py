"""Call-script engine: CRM resolution, template rendering and dialog navigation."""
