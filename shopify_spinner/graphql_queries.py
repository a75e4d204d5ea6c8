"""
GraphQL Query Definitions — Admin API documents used by the builders.

Every mutation selects `userErrors { field message }` so builders can tell a
validated user mistake (userErrors present) from an unexpected empty result
(primary object null with no userErrors).

  PRODUCT_CREATE_MUTATION          ProductBuilder, phase 1 (product shell)
  VARIANTS_BULK_CREATE_MUTATION    ProductBuilder, phase 2 (products with options)
  VARIANTS_BULK_UPDATE_MUTATION    ProductBuilder, phase 2 (single default variant)
  COLLECTION_CREATE_MUTATION       CollectionBuilder (smart collection per tag)
  PUBLICATIONS_QUERY               ProductBuilder / PublicationService
  PUBLISHABLE_PUBLISH_MUTATION     ProductBuilder / PublicationService
  THEMES_QUERY                     ThemeBuilder (find role=MAIN)
  THEME_FILES_UPSERT_MUTATION      ThemeBuilder (config/settings_data.json)
  THEME_UPDATE_MUTATION            ThemeBuilder (rename theme)
"""

PRODUCT_CREATE_MUTATION = """
mutation ProductCreate($input: ProductInput!) {
  productCreate(input: $input) {
    product {
      id
      title
      handle
      variants(first: 1) {
        edges {
          node {
            id
          }
        }
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

VARIANTS_BULK_CREATE_MUTATION = """
mutation ProductVariantsBulkCreate($productId: ID!, $variants: [ProductVariantsBulkInput!]!, $strategy: ProductVariantsBulkCreateStrategy) {
  productVariantsBulkCreate(productId: $productId, variants: $variants, strategy: $strategy) {
    product {
      id
    }
    productVariants {
      id
      sku
    }
    userErrors {
      field
      message
    }
  }
}
"""

VARIANTS_BULK_UPDATE_MUTATION = """
mutation ProductVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
  productVariantsBulkUpdate(productId: $productId, variants: $variants) {
    product {
      id
    }
    productVariants {
      id
    }
    userErrors {
      field
      message
    }
  }
}
"""

COLLECTION_CREATE_MUTATION = """
mutation CollectionCreate($input: CollectionInput!) {
  collectionCreate(input: $input) {
    collection {
      id
      title
      handle
    }
    userErrors {
      field
      message
    }
  }
}
"""

PUBLICATIONS_QUERY = """
query GetOnlineStorePublication {
  publications(first: 10) {
    edges {
      node {
        id
        name
      }
    }
  }
}
"""

PUBLISHABLE_PUBLISH_MUTATION = """
mutation PublishablePublish($id: ID!, $input: [PublicationInput!]!) {
  publishablePublish(id: $id, input: $input) {
    publishable {
      availablePublicationsCount {
        count
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

THEMES_QUERY = """
query GetThemes {
  themes(first: 10) {
    nodes {
      id
      name
      role
    }
  }
}
"""

THEME_FILES_UPSERT_MUTATION = """
mutation ThemeFilesUpsert($themeId: ID!, $files: [OnlineStoreThemeFilesUpsertFileInput!]!) {
  themeFilesUpsert(themeId: $themeId, files: $files) {
    upsertedThemeFiles {
      filename
    }
    userErrors {
      field
      message
    }
  }
}
"""

THEME_UPDATE_MUTATION = """
mutation ThemeUpdate($id: ID!, $input: OnlineStoreThemeInput!) {
  themeUpdate(id: $id, input: $input) {
    theme {
      id
      name
      role
    }
    userErrors {
      field
      message
    }
  }
}
"""
