"""GraphQL documents for the shop API.

Each document names its operation; the gateway uses that name for
metrics and logging. Shared selections are GraphQL fragments appended to
the documents that spread them.
"""

from __future__ import annotations

# ------------------------------------------------------------------
# Fragments
# ------------------------------------------------------------------

_ASSET_FIELDS = """
fragment AssetFields on Asset {
  id
  preview
  source
}
"""

_ADDRESS_FIELDS = """
fragment OrderAddressFields on OrderAddress {
  fullName
  company
  streetLine1
  streetLine2
  city
  province
  postalCode
  countryCode
  country
  phoneNumber
}
"""

_CUSTOMER_ADDRESS_FIELDS = """
fragment CustomerAddressFields on Address {
  id
  fullName
  company
  streetLine1
  streetLine2
  city
  province
  postalCode
  country {
    id
    name
    code
  }
  phoneNumber
  defaultShippingAddress
  defaultBillingAddress
}
"""

_CURRENT_USER_FIELDS = """
fragment CurrentUserFields on CurrentUser {
  id
  identifier
  channels {
    id
    code
    token
  }
}
"""

_ORDER_LINE_FIELDS = """
fragment OrderLineFields on OrderLine {
  id
  quantity
  linePriceWithTax
  productVariant {
    id
    name
    price
    priceWithTax
    sku
    product {
      id
      name
      slug
      featuredAsset {
        ...AssetFields
      }
    }
  }
}
"""

_CART_FIELDS = (
    """
fragment CartFields on Order {
  id
  code
  state
  total
  totalWithTax
  totalQuantity
  currencyCode
  lines {
    ...OrderLineFields
  }
}
"""
    + _ORDER_LINE_FIELDS
    + _ASSET_FIELDS
)

_FACET_VALUE_RESULT_FIELDS = """
fragment FacetValueResultFields on FacetValueResult {
  facetValue {
    id
    name
    code
    facet {
      id
      name
      code
    }
  }
  count
}
"""

_LISTED_VARIANT_FIELDS = """
fragment ListedVariantFields on ProductVariant {
  id
  name
  price
  priceWithTax
  sku
  stockLevel
  featuredAsset {
    ...AssetFields
  }
  product {
    id
    name
    slug
    description
    featuredAsset {
      ...AssetFields
    }
    collections {
      id
      name
      slug
    }
    facetValues {
      id
      name
      code
      facet {
        id
        name
        code
      }
    }
  }
}
"""

# ------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------

GET_PRODUCTS = (
    """
query GetProducts($options: ProductListOptions) {
  products(options: $options) {
    items {
      id
      name
      slug
      description
      featuredAsset {
        ...AssetFields
      }
      variants {
        id
        name
        price
        priceWithTax
        sku
        stockLevel
        featuredAsset {
          ...AssetFields
        }
      }
    }
    totalItems
  }
}
"""
    + _ASSET_FIELDS
)

GET_PRODUCT = (
    """
query GetProduct($slug: String, $id: ID) {
  product(slug: $slug, id: $id) {
    id
    name
    slug
    description
    featuredAsset {
      ...AssetFields
    }
    assets {
      ...AssetFields
    }
    variants {
      id
      name
      price
      priceWithTax
      sku
      stockLevel
      options {
        id
        name
        code
      }
      featuredAsset {
        ...AssetFields
      }
    }
    optionGroups {
      id
      name
      code
      options {
        id
        name
        code
      }
    }
    facetValues {
      id
      name
      code
      facet {
        id
        name
        code
      }
    }
    collections {
      id
      name
      slug
    }
  }
}
"""
    + _ASSET_FIELDS
)

GET_COLLECTIONS = (
    """
query GetCollections($options: CollectionListOptions) {
  collections(options: $options) {
    items {
      id
      name
      slug
      description
      featuredAsset {
        ...AssetFields
      }
      parent {
        id
        name
        slug
      }
      children {
        id
        name
        slug
      }
    }
    totalItems
  }
}
"""
    + _ASSET_FIELDS
)

GET_COLLECTION = (
    """
query GetCollection($slug: String, $id: ID) {
  collection(slug: $slug, id: $id) {
    id
    name
    slug
    description
    featuredAsset {
      ...AssetFields
    }
    breadcrumbs {
      id
      name
      slug
    }
    children {
      id
      name
      slug
      featuredAsset {
        ...AssetFields
      }
    }
  }
}
"""
    + _ASSET_FIELDS
)

GET_COLLECTION_WITH_PRODUCTS = (
    """
query GetCollectionWithProducts($slug: String!, $options: ProductVariantListOptions) {
  collection(slug: $slug) {
    id
    name
    slug
    description
    featuredAsset {
      ...AssetFields
    }
    breadcrumbs {
      id
      name
      slug
    }
    children {
      id
      name
      slug
      featuredAsset {
        ...AssetFields
      }
      productVariants {
        totalItems
      }
    }
    productVariants(options: $options) {
      items {
        ...ListedVariantFields
      }
      totalItems
    }
  }
}
"""
    + _LISTED_VARIANT_FIELDS
    + _ASSET_FIELDS
)

GET_SEARCH_RESULTS = (
    """
query GetSearchResults($input: SearchInput!) {
  search(input: $input) {
    items {
      productId
      productName
      slug
      description
      sku
      price {
        ... on PriceRange {
          min
          max
        }
        ... on SinglePrice {
          value
        }
      }
      priceWithTax {
        ... on PriceRange {
          min
          max
        }
        ... on SinglePrice {
          value
        }
      }
      productAsset {
        id
        preview
      }
      collectionIds
      facetIds
      facetValueIds
      score
    }
    totalItems
    facetValues {
      ...FacetValueResultFields
    }
  }
}
"""
    + _FACET_VALUE_RESULT_FIELDS
)

GET_FACETS = """
query GetFacets($options: FacetListOptions) {
  facets(options: $options) {
    items {
      id
      name
      code
      values {
        id
        name
        code
      }
    }
    totalItems
  }
}
"""

GET_COLLECTIONS_TREE = (
    """
query GetCollectionsTree {
  collections {
    items {
      id
      name
      slug
      description
      featuredAsset {
        ...AssetFields
      }
      parent {
        id
        name
        slug
      }
      children {
        id
        name
        slug
        featuredAsset {
          ...AssetFields
        }
        productVariants {
          totalItems
        }
      }
      productVariants {
        totalItems
      }
    }
    totalItems
  }
}
"""
    + _ASSET_FIELDS
)

GET_PRICE_RANGE = """
query GetPriceRange($collectionSlug: String, $term: String) {
  searchMin: search(input: {collectionSlug: $collectionSlug, term: $term, groupByProduct: true, take: 1, sort: {price: ASC}}) {
    items {
      priceWithTax {
        ... on PriceRange {
          min
          max
        }
        ... on SinglePrice {
          value
        }
      }
    }
  }
  searchMax: search(input: {collectionSlug: $collectionSlug, term: $term, groupByProduct: true, take: 1, sort: {price: DESC}}) {
    items {
      priceWithTax {
        ... on PriceRange {
          min
          max
        }
        ... on SinglePrice {
          value
        }
      }
    }
  }
}
"""

# ------------------------------------------------------------------
# Active order (cart)
# ------------------------------------------------------------------

GET_ACTIVE_ORDER = (
    """
query GetActiveOrder {
  activeOrder {
    ...CartFields
    shipping
    shippingWithTax
    shippingAddress {
      ...OrderAddressFields
    }
    billingAddress {
      ...OrderAddressFields
    }
    shippingLines {
      shippingMethod {
        id
        name
        description
      }
      priceWithTax
    }
    customer {
      id
      firstName
      lastName
      emailAddress
    }
  }
}
"""
    + _CART_FIELDS
    + _ADDRESS_FIELDS
)

ADD_ITEM_TO_ORDER = (
    """
mutation AddItemToOrder($productVariantId: ID!, $quantity: Int!) {
  addItemToOrder(productVariantId: $productVariantId, quantity: $quantity) {
    ...CartFields
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""
    + _CART_FIELDS
)

REMOVE_ORDER_LINE = (
    """
mutation RemoveOrderLine($orderLineId: ID!) {
  removeOrderLine(orderLineId: $orderLineId) {
    ...CartFields
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""
    + _CART_FIELDS
)

ADJUST_ORDER_LINE = (
    """
mutation AdjustOrderLine($orderLineId: ID!, $quantity: Int!) {
  adjustOrderLine(orderLineId: $orderLineId, quantity: $quantity) {
    ...CartFields
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""
    + _CART_FIELDS
)

# ------------------------------------------------------------------
# Checkout
# ------------------------------------------------------------------

ELIGIBLE_SHIPPING_METHODS = """
query EligibleShippingMethods {
  eligibleShippingMethods {
    id
    name
    code
    description
    priceWithTax
    metadata
  }
}
"""

ELIGIBLE_PAYMENT_METHODS = """
query EligiblePaymentMethods {
  eligiblePaymentMethods {
    id
    name
    code
    description
    isEligible
    eligibilityMessage
  }
}
"""

SET_CUSTOMER_FOR_ORDER = """
mutation SetCustomerForOrder($input: CreateCustomerInput!) {
  setCustomerForOrder(input: $input) {
    ... on Order {
      id
      code
      customer {
        id
        firstName
        lastName
        emailAddress
      }
    }
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""

SET_ORDER_SHIPPING_ADDRESS = (
    """
mutation SetOrderShippingAddress($input: CreateAddressInput!) {
  setOrderShippingAddress(input: $input) {
    ... on Order {
      id
      code
      state
      shippingAddress {
        ...OrderAddressFields
      }
    }
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""
    + _ADDRESS_FIELDS
)

SET_ORDER_BILLING_ADDRESS = (
    """
mutation SetOrderBillingAddress($input: CreateAddressInput!) {
  setOrderBillingAddress(input: $input) {
    ... on Order {
      id
      code
      state
      billingAddress {
        ...OrderAddressFields
      }
    }
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""
    + _ADDRESS_FIELDS
)

SET_ORDER_SHIPPING_METHOD = """
mutation SetOrderShippingMethod($shippingMethodId: [ID!]!) {
  setOrderShippingMethod(shippingMethodId: $shippingMethodId) {
    ... on Order {
      id
      code
      state
      shipping
      shippingWithTax
      shippingLines {
        shippingMethod {
          id
          name
          description
        }
        priceWithTax
      }
    }
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""

ADD_PAYMENT_TO_ORDER = """
mutation AddPaymentToOrder($input: PaymentInput!) {
  addPaymentToOrder(input: $input) {
    ... on Order {
      id
      code
      state
      totalWithTax
      payments {
        id
        method
        amount
        state
        metadata
      }
    }
    ... on ErrorResult {
      errorCode
      message
    }
    ... on PaymentFailedError {
      paymentErrorMessage
    }
    ... on PaymentDeclinedError {
      paymentErrorMessage
    }
  }
}
"""

TRANSITION_ORDER_TO_STATE = """
mutation TransitionOrderToState($state: String!) {
  transitionOrderToState(state: $state) {
    ... on Order {
      id
      code
      state
    }
    ... on OrderStateTransitionError {
      errorCode
      message
      transitionError
      fromState
      toState
    }
  }
}
"""

GET_ORDER_BY_CODE = (
    """
query GetOrderByCode($code: String!) {
  orderByCode(code: $code) {
    ...CartFields
    orderPlacedAt
    shipping
    shippingWithTax
    shippingAddress {
      ...OrderAddressFields
    }
    shippingLines {
      shippingMethod {
        id
        name
        description
      }
      priceWithTax
    }
    customer {
      id
      firstName
      lastName
      emailAddress
    }
    payments {
      id
      method
      amount
      state
    }
  }
}
"""
    + _CART_FIELDS
    + _ADDRESS_FIELDS
)

# ------------------------------------------------------------------
# Authentication
# ------------------------------------------------------------------

AUTHENTICATE = (
    """
mutation Authenticate($input: AuthenticationInput!, $rememberMe: Boolean) {
  authenticate(input: $input, rememberMe: $rememberMe) {
    ...CurrentUserFields
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""
    + _CURRENT_USER_FIELDS
)

REGISTER_CUSTOMER_ACCOUNT = """
mutation RegisterCustomerAccount($input: RegisterCustomerInput!) {
  registerCustomerAccount(input: $input) {
    ... on Success {
      success
    }
    ... on ErrorResult {
      errorCode
      message
    }
    ... on PasswordValidationError {
      validationErrorMessage
    }
  }
}
"""

VERIFY_CUSTOMER_ACCOUNT = (
    """
mutation VerifyCustomerAccount($token: String!, $password: String) {
  verifyCustomerAccount(token: $token, password: $password) {
    ...CurrentUserFields
    ... on ErrorResult {
      errorCode
      message
    }
    ... on PasswordValidationError {
      validationErrorMessage
    }
  }
}
"""
    + _CURRENT_USER_FIELDS
)

REQUEST_PASSWORD_RESET = """
mutation RequestPasswordReset($emailAddress: String!) {
  requestPasswordReset(emailAddress: $emailAddress) {
    ... on Success {
      success
    }
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""

RESET_PASSWORD = (
    """
mutation ResetPassword($token: String!, $password: String!) {
  resetPassword(token: $token, password: $password) {
    ...CurrentUserFields
    ... on ErrorResult {
      errorCode
      message
    }
    ... on PasswordValidationError {
      validationErrorMessage
    }
  }
}
"""
    + _CURRENT_USER_FIELDS
)

LOGOUT = """
mutation Logout {
  logout {
    success
  }
}
"""

# ------------------------------------------------------------------
# Account
# ------------------------------------------------------------------

ME = """
query Me {
  me {
    id
    identifier
    channels {
      id
      code
      token
    }
  }
  activeCustomer {
    id
    firstName
    lastName
    phoneNumber
    emailAddress
  }
}
"""

UPDATE_CUSTOMER = """
mutation UpdateCustomer($input: UpdateCustomerInput!) {
  updateCustomer(input: $input) {
    id
    firstName
    lastName
    phoneNumber
    emailAddress
  }
}
"""

UPDATE_CUSTOMER_PASSWORD = """
mutation UpdateCustomerPassword($currentPassword: String!, $newPassword: String!) {
  updateCustomerPassword(currentPassword: $currentPassword, newPassword: $newPassword) {
    ... on Success {
      success
    }
    ... on ErrorResult {
      errorCode
      message
    }
    ... on PasswordValidationError {
      validationErrorMessage
    }
  }
}
"""

UPDATE_CUSTOMER_EMAIL_ADDRESS = """
mutation UpdateCustomerEmailAddress($password: String!, $newEmailAddress: String!) {
  updateCustomerEmailAddress(password: $password, newEmailAddress: $newEmailAddress) {
    ... on Success {
      success
    }
    ... on ErrorResult {
      errorCode
      message
    }
  }
}
"""

GET_CUSTOMER_ADDRESSES = (
    """
query GetCustomerAddresses {
  activeCustomer {
    id
    addresses {
      ...CustomerAddressFields
    }
  }
}
"""
    + _CUSTOMER_ADDRESS_FIELDS
)

CREATE_CUSTOMER_ADDRESS = (
    """
mutation CreateCustomerAddress($input: CreateAddressInput!) {
  createCustomerAddress(input: $input) {
    ...CustomerAddressFields
  }
}
"""
    + _CUSTOMER_ADDRESS_FIELDS
)

UPDATE_CUSTOMER_ADDRESS = (
    """
mutation UpdateCustomerAddress($input: UpdateAddressInput!) {
  updateCustomerAddress(input: $input) {
    ...CustomerAddressFields
  }
}
"""
    + _CUSTOMER_ADDRESS_FIELDS
)

DELETE_CUSTOMER_ADDRESS = """
mutation DeleteCustomerAddress($id: ID!) {
  deleteCustomerAddress(id: $id) {
    success
  }
}
"""

GET_CUSTOMER_ORDERS = (
    """
query GetCustomerOrders($options: OrderListOptions) {
  activeCustomer {
    id
    orders(options: $options) {
      items {
        ...CartFields
        orderPlacedAt
        shippingAddress {
          ...OrderAddressFields
        }
        payments {
          id
          method
          amount
          state
        }
      }
      totalItems
    }
  }
}
"""
    + _CART_FIELDS
    + _ADDRESS_FIELDS
)

GET_AVAILABLE_COUNTRIES = """
query GetAvailableCountries {
  availableCountries {
    id
    name
    code
  }
}
"""
