APP_TITLE = "Back Office CMS"

# Page titles
PAGE_RECIPES = "Portion Control"
PAGE_PRODUCTS = "Products"
PAGE_CATEGORIES = "Categories"
PAGE_ORDERS = "Order Queue"
PAGE_EVENTS = "Events"
PAGE_EXPENSES = "Expenses"
PAGE_REPORTS = "Reports"

# Buttons
BTN_SAVE = "Save"
BTN_DELETE = "Delete"
BTN_CLONE = "Clone"
BTN_REFRESH = "Refresh"
BTN_MARK_ALL_READ = "Mark all as read"
BTN_CLEAR = "Clear"
BTN_DOWNLOAD_REPORT = "Download Excel"

# Labels
LBL_CATEGORY = "Category"
LBL_RECIPE_TARGET = "Product / variant"
LBL_SEARCH = "Search"
LBL_DATE_FROM = "From"
LBL_DATE_TO = "To"

# Guidance
MSG_NO_TARGETS = "Every product and variant already has a recipe."
MSG_NEED_CATEGORY = "Create a category before adding products."
MSG_SAVED = "Saved"
MSG_DELETED = "Deleted"
MSG_NOT_FOUND = "The selected record no longer exists."
MSG_REPORT_FAILED = "Report could not be downloaded."
MSG_NO_ITEMS = "Add at least one item."
MSG_NEW_ORDERS = "{count} new order(s)"

# Validation
ERR_NAME_REQUIRED = "Name is required."
ERR_TARGET_REQUIRED = "Choose a product or variant."
